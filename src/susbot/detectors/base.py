"""Detector interfaces for scanner rules."""

from __future__ import annotations

import inspect
import re
from abc import ABC, abstractmethod
from typing import ClassVar

from susbot.config import SusbotConfig
from susbot.constants.scoring import SEVERITY_ORDER
from susbot.detectors.common import SourceView
from susbot.model import Finding, SourceBundle
from susbot.types import Severity

_RULE_ID_PATTERN: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")


class Detector(ABC):
    """Abstract base class for detector implementations.

    A detector is a pure predicate over one bundle: it returns at most one
    finding and never raises for missing patterns.
    """

    rule_id: ClassVar[str]
    severity: ClassVar[Severity]
    title: ClassVar[str]
    description: ClassVar[str]

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Validate detector subclasses define a kebab-case `rule_id` and a severity."""
        super().__init_subclass__(**kwargs)
        if inspect.isabstract(cls):
            return

        rule_id = getattr(cls, "rule_id", None)
        if not isinstance(rule_id, str) or not rule_id.strip():
            raise TypeError(f"{cls.__name__} must define a non-empty class attribute `rule_id`")
        if not _RULE_ID_PATTERN.match(rule_id):
            raise TypeError(f"{cls.__name__}.rule_id must be kebab-case (got {rule_id!r})")
        if getattr(cls, "severity", None) not in SEVERITY_ORDER:
            raise TypeError(f"{cls.__name__} must define a valid class attribute `severity`")

    @abstractmethod
    def run(
        self,
        *,
        bundle: SourceBundle,
        view: SourceView,
        config: SusbotConfig,
    ) -> Finding | None:
        """Run detector on a source bundle and its cleaned view."""

    def finding(self, detail: str | None = None) -> Finding:
        """Build this detector's finding, appending *detail* to the base description."""
        description = self.description if not detail else f"{self.description} {detail}"
        return Finding(
            rule_id=self.rule_id,
            severity=self.severity,
            title=self.title,
            description=description,
        )
