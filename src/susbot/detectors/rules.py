"""Detector implementations for the contract rule set."""

from __future__ import annotations

import logging
import re

from susbot.config import SusbotConfig
from susbot.constants.detectors import (
    BALANCE_WRITE_PATTERN,
    CONCENTRATION_RULE_ID,
    DELEGATECALL_RULE_ID,
    DELEGATECALL_TARGET_PATTERN,
    DEPRECATED_CONSTRUCT_RULE_ID,
    DEPRECATED_CONSTRUCTS,
    INLINE_ASSEMBLY_PATTERN,
    INLINE_ASSEMBLY_RULE_ID,
    LOCAL_MEMORY_DECL_TEMPLATE,
    LOOP_BOUND_PATTERN,
    LOW_LEVEL_CALL_PATTERN,
    MINT_FUNCTION_NAME_PATTERN,
    OUTDATED_COMPILER_RULE_ID,
    PAID_MINT_PATTERN,
    PRAGMA_PATTERN,
    PRIVILEGED_TRANSFER_RULE_ID,
    REENTRANCY_GUARD_PATTERN,
    REENTRANCY_RULE_ID,
    SELF_DESTRUCT_PATTERN,
    SELF_DESTRUCT_RULE_ID,
    SUPPLY_INCREASE_PATTERN,
    TIMESTAMP_CONTROL_PATTERN,
    TIMESTAMP_RANDOMNESS_PATTERN,
    TIMESTAMP_RULE_ID,
    TRANSFER_CONTROL_FUNCTION_PATTERN,
    TRANSFER_FUNCTION_NAMES,
    TRANSFER_GATE_PATTERN,
    TX_ORIGIN_EOA_CHECK_PATTERN,
    TX_ORIGIN_GUARD_PATTERN,
    TX_ORIGIN_PATTERN,
    TX_ORIGIN_RULE_ID,
    UNBOUNDED_LOOP_RULE_ID,
    UNCHECKED_CALL_RULE_ID,
    UNRESTRICTED_MINT_RULE_ID,
    UNVERIFIED_SOURCE_RULE_ID,
    VALUE_CALL_PATTERN,
)
from susbot.detectors.base import Detector
from susbot.detectors.common import SourceView, format_version, parse_pragma_ranges, statement_prefix
from susbot.model import Finding, SourceBundle

logger = logging.getLogger(__name__)

_CALL_RESULT_CONSUMED: re.Pattern[str] = re.compile(r"=|!|\b(?:require|assert|if|return|bool)\b")


class SelfDestructDetector(Detector):
    """Detect a self-destruct reachable without an owner-only guard."""

    rule_id = SELF_DESTRUCT_RULE_ID
    severity = "critical"
    title = "Self-Destruct"
    description = (
        "The contract can be destroyed, removing it from the blockchain and sending all its funds "
        "to a designated address."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        for function in view.exposed_functions(privileged_only=True):
            if SELF_DESTRUCT_PATTERN.search(function.body):
                return self.finding(f"Reachable without access control via '{function.name}'.")
        if view.outside_functions(SELF_DESTRUCT_PATTERN):
            return self.finding()
        return None


class ReentrancyDetector(Detector):
    """Detect an external value call followed by a balance write in an unguarded function."""

    rule_id = REENTRANCY_RULE_ID
    severity = "critical"
    title = "Reentrancy"
    description = (
        "An external call is made before balance-like storage is updated, so the callee can "
        "re-enter the function and drain funds."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        for function in view.functions:
            if function.is_read_only or REENTRANCY_GUARD_PATTERN.search(function.header):
                continue
            call = VALUE_CALL_PATTERN.search(function.body)
            if call is None:
                continue
            if BALANCE_WRITE_PATTERN.search(function.body, call.end()):
                return self.finding(f"See '{function.name}'.")
        return None


class UnrestrictedMintDetector(Detector):
    """Detect a supply-increasing function callable by anyone."""

    rule_id = UNRESTRICTED_MINT_RULE_ID
    severity = "critical"
    title = "Unrestricted Mint"
    description = "Anyone can create new tokens, diluting or devaluing every holder's balance."

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        for function in view.exposed_functions():
            if not function.is_entry_point or function.is_read_only:
                continue
            if PAID_MINT_PATTERN.search(function.header) or PAID_MINT_PATTERN.search(function.body):
                continue
            if MINT_FUNCTION_NAME_PATTERN.match(function.name) or SUPPLY_INCREASE_PATTERN.search(function.body):
                return self.finding(f"See '{function.name}'.")
        return None


class DelegatecallDetector(Detector):
    """Detect delegatecall to a caller-supplied address from an unguarded function."""

    rule_id = DELEGATECALL_RULE_ID
    severity = "critical"
    title = "Delegate Call"
    description = (
        "Unsafe use of 'delegatecall' lets a caller run arbitrary code with this contract's "
        "storage and balance."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        for function in view.exposed_functions():
            for match in DELEGATECALL_TARGET_PATTERN.finditer(function.body):
                target = match.group("wrapped") or match.group("plain")
                if target in function.param_names:
                    return self.finding(f"Target '{target}' comes from a parameter of '{function.name}'.")
        return None


class TxOriginAuthDetector(Detector):
    """Detect authorization checks on ``tx.origin`` instead of ``msg.sender``."""

    rule_id = TX_ORIGIN_RULE_ID
    severity = "high"
    title = "tx.origin Authentication"
    description = (
        "Using 'tx.origin' for authentication is unsafe and can make the contract vulnerable "
        "to phishing attacks."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        for match in TX_ORIGIN_GUARD_PATTERN.finditer(view.text):
            condition = TX_ORIGIN_EOA_CHECK_PATTERN.sub("", match.group("cond"))
            if TX_ORIGIN_PATTERN.search(condition):
                return self.finding()
        return None


class UncheckedCallDetector(Detector):
    """Detect low-level calls whose success flag is discarded."""

    rule_id = UNCHECKED_CALL_RULE_ID
    severity = "high"
    title = "Unchecked Call Return Value"
    description = (
        "A low-level call's return value is not checked, so a failed external call is silently "
        "ignored."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        for match in LOW_LEVEL_CALL_PATTERN.finditer(view.text):
            prefix = statement_prefix(view.text, match.start())
            if not _CALL_RESULT_CONSUMED.search(prefix):
                return self.finding()
        return None


class PrivilegedTransferControlDetector(Detector):
    """Detect pause or blacklist gating of transfers held by a single owner."""

    rule_id = PRIVILEGED_TRANSFER_RULE_ID
    severity = "high"
    title = "Centralized Transfer Control"
    description = (
        "A single privileged address can pause transfers or blacklist holders, freezing "
        "anyone's tokens."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        transfer_gated = any(
            function.name in TRANSFER_FUNCTION_NAMES
            and (TRANSFER_GATE_PATTERN.search(function.header) or TRANSFER_GATE_PATTERN.search(function.body))
            for function in view.functions
        )
        if not transfer_gated:
            return None
        for function in view.functions:
            if TRANSFER_CONTROL_FUNCTION_PATTERN.match(function.name) and view.has_owner_guard(function):
                return self.finding(f"Controlled through '{function.name}'.")
        return None


class DistributionConcentrationDetector(Detector):
    """Detect token supply concentrated in the largest holders."""

    rule_id = CONCENTRATION_RULE_ID
    severity = "high"
    title = "Holder Concentration"
    description = "A few holders control most of the supply and can move the market or the governance."

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        if not bundle.holders:
            return None
        settings = config.holder_concentration
        top = sorted((holder.percent for holder in bundle.holders), reverse=True)[: settings.top_n]
        share = sum(top)
        if share <= settings.threshold_percent:
            return None
        return self.finding(
            f"Top {len(top)} holders own {share:.2f}% of supply (threshold {settings.threshold_percent:g}%)."
        )


class TimestampDependencyDetector(Detector):
    """Detect control flow or randomness derived from the block timestamp."""

    rule_id = TIMESTAMP_RULE_ID
    severity = "medium"
    title = "Block Timestamp Dependency"
    description = "The contract's logic depends on 'block.timestamp', which can be manipulated by miners."

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        if TIMESTAMP_CONTROL_PATTERN.search(view.text) or TIMESTAMP_RANDOMNESS_PATTERN.search(view.text):
            return self.finding()
        return None


class UnboundedLoopDetector(Detector):
    """Detect loops over a growable storage array inside state-changing functions."""

    rule_id = UNBOUNDED_LOOP_RULE_ID
    severity = "medium"
    title = "Unbounded Loop"
    description = (
        "A state-changing function loops over a storage array that anyone can grow, so it can "
        "run out of gas and become unusable."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        for function in view.functions:
            if function.is_read_only:
                continue
            for match in LOOP_BOUND_PATTERN.finditer(function.body):
                collection = match.group("collection")
                if collection in function.param_names:
                    continue
                if re.search(LOCAL_MEMORY_DECL_TEMPLATE.format(name=re.escape(collection)), function.body):
                    continue
                if re.search(rf"\b{re.escape(collection)}\.push\s*\(", view.text):
                    return self.finding(f"'{function.name}' iterates over '{collection}'.")
        return None


class OutdatedCompilerDetector(Detector):
    """Detect pragmas admitting old compilers or with no upper bound."""

    rule_id = OUTDATED_COMPILER_RULE_ID
    severity = "low"
    title = "Outdated Compiler Version"
    description = "The version pragma admits an old or unpinned Solidity compiler."

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        minimum = config.min_compiler_version_tuple
        reasons: list[str] = []
        for match in PRAGMA_PATTERN.finditer(view.text):
            for pragma_range in parse_pragma_ranges(match.group("expr")):
                if pragma_range.lowest < minimum:
                    reason = (
                        f"Allows {format_version(pragma_range.lowest)}, below the minimum "
                        f"{config.min_compiler_version}."
                    )
                else:
                    reason = ""
                if not pragma_range.bounded:
                    reason = f"{reason} Has no upper version bound.".strip()
                if reason and reason not in reasons:
                    reasons.append(reason)
        if not reasons:
            return None
        return self.finding(" ".join(reasons))


class DeprecatedConstructDetector(Detector):
    """Detect superseded language constructs that have safer successors."""

    rule_id = DEPRECATED_CONSTRUCT_RULE_ID
    severity = "low"
    title = "Deprecated Construct"
    description = "The contract uses superseded language constructs."

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        used = [label for pattern, label in DEPRECATED_CONSTRUCTS if pattern.search(view.text)]
        if not used:
            return None
        return self.finding(f"Found: {', '.join(used)}.")


class InlineAssemblyDetector(Detector):
    """Flag inline assembly for manual review."""

    rule_id = INLINE_ASSEMBLY_RULE_ID
    severity = "info"
    title = "Inline Assembly"
    description = (
        "Use of inline assembly ('assembly') bypasses compiler safety checks and requires "
        "careful review."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        if INLINE_ASSEMBLY_PATTERN.search(view.text):
            return self.finding()
        return None


class UnverifiedSourceDetector(Detector):
    """Report source text that the explorer has not verified."""

    rule_id = UNVERIFIED_SOURCE_RULE_ID
    severity = "info"
    title = "Unverified Source"
    description = (
        "The contract source code is not verified, so the analyzed text may not match the "
        "deployed bytecode."
    )

    def run(self, *, bundle: SourceBundle, view: SourceView, config: SusbotConfig) -> Finding | None:
        if bundle.status == "partial_unverified":
            return self.finding()
        return None


DETECTOR_CLASSES: tuple[type[Detector], ...] = (
    SelfDestructDetector,
    ReentrancyDetector,
    UnrestrictedMintDetector,
    DelegatecallDetector,
    TxOriginAuthDetector,
    UncheckedCallDetector,
    PrivilegedTransferControlDetector,
    DistributionConcentrationDetector,
    TimestampDependencyDetector,
    UnboundedLoopDetector,
    OutdatedCompilerDetector,
    DeprecatedConstructDetector,
    InlineAssemblyDetector,
    UnverifiedSourceDetector,
)


def build_detectors(rule_ids: tuple[str, ...]) -> list[Detector]:
    """Instantiate detectors for *rule_ids* in declaration order."""
    by_id = {cls.rule_id: cls for cls in DETECTOR_CLASSES}
    unknown = sorted(set(rule_ids) - set(by_id))
    for rule_id in unknown:
        logger.warning("Unknown detector id '%s' ignored", rule_id)
    wanted = set(rule_ids)
    return [cls() for cls in DETECTOR_CLASSES if cls.rule_id in wanted]
