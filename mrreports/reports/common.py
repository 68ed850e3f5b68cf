"""
Helpers shared by the report assemblers: file naming, links and the fixed
notices shown when there is nothing to report.

The sanitization rule here also decides which files the synchronizer keeps,
so assemblers and the synchronizer must both go through sanitize_name().
"""

import re
from typing import Any, Optional
from urllib.parse import quote

from ..display.blocks import Block, Heading, Paragraph
from ..display.markdown import bold, display_value, link
from ..utils.config import ReportSettings

_UNSAFE_FILENAME_CHARS = re.compile(r"[\s,.?!]")

# Reserved URI characters kept as-is; parentheses are escaped for markdown link targets
_ENCODE_URI_SAFE = ";,/?:@&=+$#-_.!~*'"

REGIONS = {
    "AMER": "Americas",
    "EMEA": "Europe, Middle East and Africa",
    "APAC": "Asia Pacific and Japan",
}

MAPS_WARNING = (
    "If you are using Safari and had previously disabled `Prevent cross-site tracking` "
    "feature in the `Privacy tab` in Safari's preferences, you can now reenable it since "
    "this bug has been fixed by GitHub."
)


def sanitize_name(name: str) -> str:
    """Remove whitespace, commas, periods, question and exclamation marks."""
    return _UNSAFE_FILENAME_CHARS.sub("", name)


def report_filename(name: str, ext: str = ".md") -> str:
    """File name of the report for an entity."""
    return f"{sanitize_name(name)}{ext}"


def encode_uri(value: str) -> str:
    return quote(value, safe=_ENCODE_URI_SAFE)


def relative_link(name: str, ext: str = ".md") -> str:
    """Link from a directory README to an entity report in the same directory."""
    return f"./{encode_uri(report_filename(name, ext))}"


def region_name(code: Optional[str]) -> str:
    if code is None:
        return display_value(None)
    return REGIONS.get(code, code)


def badge(label: str, value: Any) -> str:
    """shields.io badge image."""
    def escape(text: str) -> str:
        return quote(str(text).replace("-", "--").replace("_", "__"), safe="")

    return f"![{label}](https://img.shields.io/badge/{escape(label)}-{escape(display_value(value))}-blue)"


# =============================================================================
# Navigation and footer
# =============================================================================

def back_link(text: str, target: str) -> Paragraph:
    return Paragraph(f"[{link(text, target)}]")


def footer(entity: Any) -> Paragraph:
    """Created/modified strip closing each entity report."""
    created = display_value(getattr(entity, "creation_date", None))
    creator = display_value(getattr(entity, "creator_name", None))
    modified = display_value(getattr(entity, "modification_date", None))
    return Paragraph(
        f"[ {bold('Created:')} {created} by {creator} | {bold('Modified:')} {modified} ]"
    )


# =============================================================================
# Fixed notices
# =============================================================================

def _contact(settings: ReportSettings, email: str) -> str:
    return (
        f"reach out to your Mediumroast team via {link('Discord', settings.contact_discord)} "
        f"or email us at {link(email, 'mailto:' + email)}"
    )


def uncaffeinated_notice(settings: ReportSettings) -> list[Block]:
    """Shown instead of insights for a study that has not been analyzed."""
    return [
        Heading(1, "Notice"),
        Paragraph(
            "Your study hasn't been analyzed by Mediumroast's Caffeine Machine Intelligence "
            f"service yet. Please {_contact(settings, settings.support_email)} to arrange for "
            "onboarding, preparation and caffeinating your study."
        ),
    ]


def no_top_insights_notice(settings: ReportSettings) -> list[Block]:
    """Shown when a caffeinated study has no insight snapshots."""
    return [
        Paragraph(
            "There are no insights for this study. This means for the Interactions collected "
            "for this study, there are no insights that are considered to be of high "
            "importance. If you would like to learn more about how to improve the quality of "
            f"the insights for this study, please {_contact(settings, settings.contact_email)}."
        )
    ]


def no_company_insights_notice(settings: ReportSettings) -> list[Block]:
    """Shown under a study company that has no insight records."""
    return [
        Paragraph(
            "There are no top insights for this company due to either an insufficient number "
            "of collected Interactions or more generically none of the thresholds triggering "
            "an important insight were met. If you would like to learn more about improving "
            "insights quality and output for this company, please "
            f"{_contact(settings, settings.contact_email)}."
        )
    ]


def no_studies_notice(settings: ReportSettings) -> list[Block]:
    """Shown instead of the studies table when there are no studies."""
    return [
        Heading(1, "Notice"),
        Paragraph(
            "There are no studies present in your Mediumroast for GitHub repository. Please "
            "initialize the `Foundation` study using `mrcli study --init_foundation` command. "
            "After you've initialized the `Foundation` study please "
            f"{_contact(settings, settings.contact_email)}."
        ),
    ]


def maps_warning() -> Paragraph:
    return Paragraph(MAPS_WARNING, label="Notice")
