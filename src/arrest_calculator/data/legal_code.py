"""Legal-code table and addition catalog loading.

The published penal code is a JSON object keyed by charge ID. Several fields
mix shapes: ``time``/``maxtime`` are either a single ``{days, hours, min}``
duration or a map of such durations keyed by drug category, ``fine`` is keyed
by offence count or by drug category, and ``bail.auto``/``bail.cost`` are
either scalars or per-category maps. Everything is normalised here into the
typed field variants from ``core.types`` so the engine never probes shapes.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

import requests

from arrest_calculator.config import Settings
from arrest_calculator.core.types import (
    CHARGE_CLASSES,
    OFFENCE_COUNTS,
    Addition,
    AdditionCatalog,
    BailAuto,
    BailTerms,
    CategoryDurations,
    CategoryFines,
    ChargeDefinition,
    ChargeType,
    Duration,
    DurationField,
    FineField,
    FlatDuration,
    LegalCodeTable,
    OffenceFines,
)

logger = logging.getLogger(__name__)

BUNDLED_ADDITIONS = Path(__file__).with_name("additions.json")
DURATION_KEYS = {"days", "hours", "min"}
REQUEST_HEADERS = {"Accept": "application/json"}


class LegalCodeError(RuntimeError):
    """The legal-code table or addition catalog could not be loaded."""


def to_float(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_flags(raw: Any, keys: tuple[str, ...]) -> dict[str, bool]:
    # Missing flag tables mean every selection is legal.
    if not isinstance(raw, dict):
        return dict.fromkeys(keys, True)
    return {str(k): bool(v) for k, v in raw.items()}


def parse_number_map(raw: Any) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    return {str(k): to_float(v) for k, v in raw.items()}


def is_duration(raw: Any) -> bool:
    return isinstance(raw, dict) and bool(raw) and set(raw) <= DURATION_KEYS


def parse_duration(raw: Any) -> Duration:
    if not isinstance(raw, dict):
        return Duration()
    return Duration(
        days=to_float(raw.get("days")),
        hours=to_float(raw.get("hours")),
        min=to_float(raw.get("min")),
    )


def parse_duration_field(raw: Any) -> DurationField:
    if not isinstance(raw, dict) or not raw:
        return FlatDuration()
    if is_duration(raw):
        return FlatDuration(parse_duration(raw))
    return CategoryDurations({str(k): parse_duration(v) for k, v in raw.items()})


def parse_fine_field(raw: Any, drug_categories: dict[str, str] | None) -> FineField:
    amounts = parse_number_map(raw)
    if drug_categories and any(k not in OFFENCE_COUNTS for k in amounts):
        return CategoryFines(amounts)
    return OffenceFines(amounts)


def parse_bail_auto(raw: Any) -> BailAuto | None:
    if raw is True:
        return BailAuto.ELIGIBLE
    if raw is False:
        return BailAuto.NOT_ELIGIBLE
    if isinstance(raw, int) and raw == 2:
        return BailAuto.DISCRETIONARY
    return None


def parse_bail(raw: Any) -> BailTerms:
    if not isinstance(raw, dict):
        return BailTerms()

    auto_raw = raw.get("auto")
    cost_raw = raw.get("cost")

    auto_by_category = None
    auto = None
    if isinstance(auto_raw, dict):
        auto_by_category = {str(k): parse_bail_auto(v) for k, v in auto_raw.items()}
    else:
        auto = parse_bail_auto(auto_raw)

    cost_by_category = None
    cost = 0.0
    if isinstance(cost_raw, dict):
        cost_by_category = parse_number_map(cost_raw)
    else:
        cost = to_float(cost_raw)

    return BailTerms(
        auto=auto,
        cost=cost,
        auto_by_category=auto_by_category,
        cost_by_category=cost_by_category,
    )


def parse_charge_type(raw: Any) -> ChargeType:
    try:
        return ChargeType(str(raw).strip().upper())
    except ValueError:
        return ChargeType.UNKNOWN


def parse_charge(charge_id: str, raw: dict[str, Any]) -> ChargeDefinition:
    drugs = raw.get("drugs")
    drug_categories = {str(k): str(v) for k, v in drugs.items()} if isinstance(drugs, dict) and drugs else None

    count = raw.get("code_enhancement_count")
    return ChargeDefinition(
        id=str(raw.get("id") or charge_id),
        name=clean_text(raw.get("charge")) or "",
        type=parse_charge_type(raw.get("type")),
        class_flags=parse_flags(raw.get("class"), CHARGE_CLASSES),
        offence_flags=parse_flags(raw.get("offence"), OFFENCE_COUNTS),
        min_time=parse_duration_field(raw.get("time")),
        max_time=parse_duration_field(raw.get("maxtime")),
        points_by_class=parse_number_map(raw.get("points")),
        fine=parse_fine_field(raw.get("fine"), drug_categories),
        impound_by_offence=parse_number_map(raw.get("impound")),
        suspension_by_offence=parse_number_map(raw.get("suspension")),
        bail=parse_bail(raw.get("bail")),
        drug_categories=drug_categories,
        stipulation_text=clean_text(raw.get("extra")),
        definition=clean_text(raw.get("definition")),
        code_enhancement=clean_text(raw.get("code_enhancement")),
        code_enhancement_count=int(to_float(count)) if count else None,
    )


def parse_legal_code(raw: Any) -> LegalCodeTable:
    if isinstance(raw, list):
        raw = {str(item.get("id")): item for item in raw if isinstance(item, dict)}
    if not isinstance(raw, dict):
        raise LegalCodeError(f"Legal code must be a JSON object keyed by charge ID, got {type(raw).__name__}")

    table: LegalCodeTable = {}
    for charge_id, entry in raw.items():
        if not isinstance(entry, dict):
            logger.warning(f"Skipping malformed legal-code entry {charge_id!r}")
            continue
        charge = parse_charge(str(charge_id), entry)
        table[str(charge_id)] = charge
    return table


def parse_additions(raw: Any, parole_violation_name: str = "Parole Violation") -> AdditionCatalog:
    entries = raw.get("additions", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise LegalCodeError("Additions must be a JSON list or an object with an 'additions' list")

    additions = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        additions.append(
            Addition(
                name=str(entry["name"]),
                sentence_multiplier=to_float(entry.get("sentence_multiplier", 1)),
                points_multiplier=to_float(entry.get("points_multiplier", 1)),
            )
        )
    return AdditionCatalog(additions=tuple(additions), parole_violation_name=parole_violation_name)


def selectable_additions(catalog: AdditionCatalog) -> list[Addition]:
    """Additions a user may pick; parole violation is applied from the report flag instead."""
    return [a for a in catalog.additions if a.name != catalog.parole_violation_name]


def read_json(path: str | Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LegalCodeError(f"Could not read {path}: {e}") from e


class LegalCodeClient:
    """Fetches the published penal code from the content delivery network."""

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.update(REQUEST_HEADERS)

    def close(self):
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> LegalCodeClient:
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _get(self, url: str, params: dict[str, str] | None = None) -> requests.Response:
        retries = max(self.settings.max_retries, 1)
        backoff = self.settings.retry_backoff

        for attempt in range(retries):
            last_attempt = attempt == retries - 1
            try:
                logger.info(f"Fetching: {url}")
                response = self.session.get(url, params=params, timeout=self.settings.request_timeout)

                if response.status_code == 200:
                    return response
                if response.status_code == 429 and not last_attempt:
                    wait = backoff ** (attempt + 1)
                    logger.warning(f"Rate limited, waiting {wait}s...")
                    time.sleep(wait)
                    continue
                logger.warning(f"HTTP {response.status_code} for {url}")
                response.raise_for_status()
                raise LegalCodeError(f"Unexpected HTTP {response.status_code} for {url}")

            except requests.RequestException as e:
                if last_attempt:
                    raise LegalCodeError(f"Failed to fetch {url}: {e}") from e
                wait = backoff ** (attempt + 1)
                logger.warning(f"Request failed ({e}), retrying in {wait}s...")
                time.sleep(wait)

        raise LegalCodeError(f"Failed to fetch {url}")

    def fetch_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        response = self._get(url, params)
        try:
            return response.json()
        except ValueError as e:
            raise LegalCodeError(f"Invalid JSON from {url}: {e}") from e

    def fetch_legal_code(self) -> LegalCodeTable:
        cdn = self.settings.content_delivery_network
        if not cdn:
            raise LegalCodeError("CONTENT_DELIVERY_NETWORK is not configured")
        raw = self.fetch_json(cdn, params={"file": self.settings.legal_code_file})
        table = parse_legal_code(raw)
        logger.info(f"Loaded {len(table)} charges from {cdn}")
        return table


def load_legal_code(settings: Settings, source: str | None = None) -> LegalCodeTable:
    """Load the table from an explicit path/URL, the configured path, or the CDN."""
    source = source or settings.legal_code_path
    if source and source.startswith(("http://", "https://")):
        with LegalCodeClient(settings) as client:
            return parse_legal_code(client.fetch_json(source))
    if source:
        table = parse_legal_code(read_json(source))
        logger.info(f"Loaded {len(table)} charges from {source}")
        return table
    with LegalCodeClient(settings) as client:
        return client.fetch_legal_code()


def load_additions(settings: Settings) -> AdditionCatalog:
    path = settings.additions_path or BUNDLED_ADDITIONS
    return parse_additions(read_json(path), settings.parole_violation_definition)
