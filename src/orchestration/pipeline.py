"""
End-to-end pipeline: fetch components from Figma → select/transform → publish to Google Sheets.
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime

from src.errors import PublishError
from src.figma.client import FigmaClient
from src.figma.records import ComponentRecord, collect_tagged_components
from src.sheet_writer.config import CredentialSource, EnvCredentialSource
from src.sheet_writer.writer import DEFAULT_CLEAR_RANGE, DEFAULT_ORIGIN, SheetPublisher
from src.transform.rows import (
    DEFAULT_LINK_LABEL,
    LINK_STYLES,
    PublishBatch,
    apply_usages,
    build_batch,
    select_components,
)

logger = logging.getLogger(__name__)

# Defaults for this project's design library and report sheet
DEFAULT_FILE_KEY = "oZGlxnWyOHTAgG6cyLkNJh"
DEFAULT_SPREADSHEET_ID = "1liLtRG7yUe1T5wfwEqdOy_B4H-tne2cDoBMIbZZnTUI"
MAX_COMPONENTS = 10

SOURCES = ("library", "document")


class Stage(str, enum.Enum):
    START = "START"
    FETCHED = "FETCHED"
    TRANSFORMED = "TRANSFORMED"
    VERIFIED = "VERIFIED"
    CLEARED = "CLEARED"
    WRITTEN = "WRITTEN"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PublishConfig:
    """Everything a run needs besides credentials."""
    file_key: str = DEFAULT_FILE_KEY
    spreadsheet_id: str = DEFAULT_SPREADSHEET_ID
    max_components: int = MAX_COMPONENTS
    include_usage_lookup: bool = True
    link_style: str = "formula"
    include_description: bool = True
    include_timestamp: bool = False
    verify_access_first: bool = True
    source: str = "library"
    worksheet: str | None = None
    clear_range: str = DEFAULT_CLEAR_RANGE
    origin: str = DEFAULT_ORIGIN
    link_label: str = DEFAULT_LINK_LABEL

    def __post_init__(self):
        if self.max_components < 1:
            raise ValueError(f"max_components must be >= 1, got {self.max_components}")
        if self.link_style not in LINK_STYLES:
            raise ValueError(f"link_style must be one of {LINK_STYLES}, got {self.link_style!r}")
        if self.source not in SOURCES:
            raise ValueError(f"source must be one of {SOURCES}, got {self.source!r}")


@dataclass
class PipelineResult:
    """Result of one publish run."""
    stage: Stage = Stage.START
    fetched_count: int = 0
    rows_written: int = 0
    batch: PublishBatch | None = None
    failed_stage: Stage | None = None
    error: PublishError | None = None
    stages: list[Stage] = field(default_factory=lambda: [Stage.START])

    @property
    def ok(self) -> bool:
        return self.stage is Stage.DONE

    def advance(self, stage: Stage) -> None:
        self.stage = stage
        self.stages.append(stage)
        logger.info("Stage %s", stage.value)

    def fail(self, error: PublishError, attempted: Stage) -> None:
        """Record the error against the stage that was being attempted when it was raised."""
        self.failed_stage = attempted
        self.error = error
        self.advance(Stage.FAILED)


def fetch_components(figma: FigmaClient, config: PublishConfig) -> list[ComponentRecord]:
    """Read the component list, then (optionally) join usage counts from a second request."""
    if config.source == "document":
        records = collect_tagged_components(figma.get_file_document(config.file_key))
        logger.info("Found %d tagged components in file %s", len(records), config.file_key)
    else:
        records = figma.get_components(config.file_key)
    if config.include_usage_lookup and records:
        usages = figma.get_component_usages(config.file_key, [r.node_id for r in records])
        records = apply_usages(records, usages)
    return records


def transform(records: list[ComponentRecord], config: PublishConfig, now: datetime | None = None) -> PublishBatch:
    selected = select_components(records, config.max_components)
    return build_batch(
        selected,
        config.file_key,
        link_style=config.link_style,
        link_label=config.link_label,
        include_description=config.include_description,
        include_path_and_tags=config.source == "document",
        include_timestamp=config.include_timestamp,
        now=now,
    )


def run_pipeline(
    config: PublishConfig | None = None,
    *,
    credentials: CredentialSource | None = None,
    figma: FigmaClient | None = None,
    publisher: SheetPublisher | None = None,
    now: datetime | None = None,
) -> PipelineResult:
    """
    Run the full flow: fetch → transform → verify → clear → write.
    Stops at the first PublishError and reports it on the result; nothing is retried.
    Pass `figma` / `publisher` to inject clients (credentials are then only read for
    the ones not supplied).
    """
    config = config or PublishConfig()
    credentials = credentials or EnvCredentialSource()
    result = PipelineResult()
    owns_figma = figma is None
    attempting = Stage.FETCHED

    try:
        # 1. Fetch from Figma
        if figma is None:
            figma = FigmaClient(credentials.figma_token())
        try:
            records = fetch_components(figma, config)
        finally:
            if owns_figma:
                figma.close()
        result.fetched_count = len(records)
        result.advance(Stage.FETCHED)

        # 2. Cap and shape rows
        attempting = Stage.TRANSFORMED
        result.batch = transform(records, config, now=now)
        result.advance(Stage.TRANSFORMED)

        # 3. Publish; without the separate check, opening the sheet counts as part of clearing
        attempting = Stage.VERIFIED if config.verify_access_first else Stage.CLEARED
        if publisher is None:
            publisher = SheetPublisher(credentials.google_credentials())
        spreadsheet = publisher.verify_access(config.spreadsheet_id)
        if config.verify_access_first:
            result.advance(Stage.VERIFIED)
        attempting = Stage.CLEARED
        publisher.clear(spreadsheet, config.clear_range, config.worksheet)
        result.advance(Stage.CLEARED)
        attempting = Stage.WRITTEN
        result.rows_written = publisher.write(spreadsheet, result.batch, config.origin, config.worksheet)
        result.advance(Stage.WRITTEN)
    except PublishError as e:
        logger.error("Publish failed at %s: %s", attempting.value, e)
        result.fail(e, attempting)
        return result

    result.advance(Stage.DONE)
    return result
