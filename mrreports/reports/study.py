"""
Per-study markdown page with the top insights of a caffeinated study.
"""

from ..analytics.insights import InsightSummary, StudyInsights, study_top_insights
from ..display.blocks import (
    Block,
    BulletList,
    CollapsibleSection,
    Heading,
    HorizontalRule,
    Paragraph,
)
from ..display.markdown import bold, code, display_value
from ..utils.config import ReportSettings
from ..utils.logger import get_logger
from ..validation.schemas import Study
from .common import (
    back_link,
    footer,
    no_company_insights_notice,
    no_top_insights_notice,
    uncaffeinated_notice,
)

logger = get_logger("mrreports.reports.study")


def insight_details(summary: InsightSummary) -> BulletList:
    return BulletList((
        f"{bold('Type:')} {display_value(summary.type)}",
        f"{bold('Average Similarity Score:')} {summary.avg_similarity_score:.3f}",
        f"{bold('Excerpts:')} {display_value(summary.excerpts)}",
    ))


class StudyReport:
    """Studies/<Name>.md for one study."""

    def __init__(self, study: Study, settings: ReportSettings):
        self.study = study
        self.settings = settings

    def introduction(self) -> list[Block]:
        return [
            back_link("Back to Study Directory", "./README.md"),
            HorizontalRule(),
            Heading(1, f"{self.study.name} Study"),
            Paragraph(display_value(self.study.description), label="Description"),
            HorizontalRule(),
        ]

    def top_insights(self, insights: StudyInsights) -> list[Block]:
        as_of = insights.taken_at.strftime("%a %b %d %Y")
        blocks: list[Block] = [
            Heading(2, f"Top Source Insights as of {code(as_of)}"),
            Paragraph(
                "The following insights are automatically generated by Mediumroast's Caffeine "
                "Machine Intelligence service, and derived from Interactions associated to the "
                "Companies in the study. This analysis means to help you understand the most "
                f"important insights for the {code(insights.total_companies)} Companies in the "
                f"study. For brevity only the first {self.settings.insights_per_interaction} "
                "insights are reported."
            ),
        ]

        for company, per_interaction in insights.insights.items():
            blocks.append(Heading(3, company))
            if not per_interaction:
                blocks.extend(no_company_insights_notice(self.settings))
            for interaction, summaries in per_interaction.items():
                blocks.append(Heading(4, interaction))
                for summary in summaries[:self.settings.insights_per_interaction]:
                    blocks.append(Paragraph(display_value(summary.insight), label="Insight"))
                    blocks.append(CollapsibleSection(
                        "Insight Details, click to expand", (insight_details(summary),)
                    ))
            blocks.append(HorizontalRule())
        return blocks

    def analysis(self) -> list[Block]:
        if not self.study.is_caffeinated:
            return uncaffeinated_notice(self.settings)

        insights = study_top_insights(self.study, self.settings.top_insight_count)
        if insights is None:
            return no_top_insights_notice(self.settings)
        logger.debug(
            f"Study '{self.study.name}': insights for {len(insights.insights)} companies"
        )
        return self.top_insights(insights)

    def build(self) -> list[Block]:
        return [*self.introduction(), *self.analysis(), footer(self.study)]
