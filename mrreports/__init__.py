"""
Mediumroast Reports
===================

Report generation for Mediumroast company intelligence repositories.

Source code organization:
- analytics/    - Quartile ranking and top-insight aggregation
- core/         - Exceptions, shared types, storage protocols
- display/      - Report blocks and the markdown/docx renderers
- maintenance/  - Repository housekeeping (branch pruning)
- reports/      - Report assemblers and the report pipeline
- storage/      - GitHub, local disk, S3 and ZIP archive access
- utils/        - Shared utilities (config, logging, retry)
- validation/   - Pydantic schemas for companies, interactions and studies
"""

__version__ = "1.0.0"
