"""Effect catalog - static per-effect configuration for a match."""

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..db.models.enums import CATALOG_KINDS, EffectKind


@dataclass(frozen=True)
class EffectConfig:
    """Configuration of a single effect kind."""

    power: int = 0
    rate: int = 0
    duration: int = 0
    cooldown: int = 0


class EffectRecord(BaseModel):
    """One catalog record as supplied by a data source."""

    kind: EffectKind = Field(description="Effect kind this record configures")
    power: int = Field(default=0, ge=0, description="One-shot amount (attack hit, fireball burst)")
    rate: int = Field(default=0, ge=0, description="Per-tick amount, or absorption for shields")
    duration: int = Field(default=0, ge=0, description="Ticks the effect stays active")
    cooldown: int = Field(default=0, ge=0, description="Ticks after duration before re-trigger")

    def to_config(self) -> EffectConfig:
        return EffectConfig(power=self.power, rate=self.rate, duration=self.duration, cooldown=self.cooldown)


DEFAULT_EFFECT_RECORDS: list[dict[str, Any]] = [
    {"kind": "attack", "power": 10},
    {"kind": "shield", "rate": 15, "duration": 3, "cooldown": 2},
    {"kind": "regeneration", "rate": 5, "duration": 3, "cooldown": 2},
    {"kind": "fireball", "power": 10, "rate": 5, "duration": 3, "cooldown": 3},
    {"kind": "cleanup", "duration": 1, "cooldown": 3},
]


@dataclass
class CatalogIssue:
    """A single catalog validation problem."""

    field: str
    message: str
    value: str | None = None


class CatalogError(ValueError):
    """Raised when an effect catalog cannot be used to start a match."""

    def __init__(self, issues: list[CatalogIssue]) -> None:
        self.issues = issues
        details = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        super().__init__(f"Invalid effect catalog: {details}")


@dataclass(frozen=True)
class EffectCatalog(Mapping[EffectKind, EffectConfig]):
    """Immutable mapping from effect kind to its configuration.

    Every kind in CATALOG_KINDS must be present. Build one with
    `from_records` (or `from_json_file`) so records are validated.
    """

    configs: Mapping[EffectKind, EffectConfig] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "configs", MappingProxyType(dict(self.configs)))

    def __getitem__(self, kind: EffectKind) -> EffectConfig:
        return self.configs[kind]

    def __iter__(self) -> Iterator[EffectKind]:
        return iter(self.configs)

    def __len__(self) -> int:
        return len(self.configs)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any] | EffectRecord]) -> "EffectCatalog":
        """Validate records and build a catalog.

        Args:
            records: Dicts or EffectRecord instances, one per kind

        Returns:
            A complete EffectCatalog

        Raises:
            CatalogError: If a record is malformed, duplicated, or a kind is missing
        """
        issues: list[CatalogIssue] = []
        configs: dict[EffectKind, EffectConfig] = {}

        for i, raw in enumerate(records):
            try:
                record = raw if isinstance(raw, EffectRecord) else EffectRecord.model_validate(raw)
            except PydanticValidationError as exc:
                for error in exc.errors():
                    location = ".".join(str(part) for part in error["loc"])
                    issues.append(CatalogIssue(f"records[{i}].{location}", error["msg"], str(error.get("input"))))
                continue

            if record.kind == EffectKind.NONE:
                issues.append(CatalogIssue(f"records[{i}].kind", "NONE cannot be configured", record.kind.value))
            elif record.kind in configs:
                issues.append(CatalogIssue(f"records[{i}].kind", "Duplicate effect kind", record.kind.value))
            else:
                configs[record.kind] = record.to_config()

        for kind in CATALOG_KINDS:
            if kind not in configs:
                issues.append(CatalogIssue("kind", "Missing effect kind", kind.value))

        if issues:
            raise CatalogError(issues)

        return cls(configs=configs)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "EffectCatalog":
        """Load a catalog from a JSON file holding a list of records."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise CatalogError([CatalogIssue("records", "Expected a list of effect records")])
        return cls.from_records(data)

    @classmethod
    def default(cls) -> "EffectCatalog":
        """Catalog with the built-in effect values."""
        return cls.from_records(DEFAULT_EFFECT_RECORDS)

    def to_records(self) -> list[dict[str, Any]]:
        """Serialize back to the record format."""
        return [
            {
                "kind": kind.value,
                "power": config.power,
                "rate": config.rate,
                "duration": config.duration,
                "cooldown": config.cooldown,
            }
            for kind, config in self.configs.items()
        ]
