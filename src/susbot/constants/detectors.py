"""Constants for detector rule ids, patterns, and messages."""

from __future__ import annotations

import re

# Rule ids in declaration order; the order breaks ties between equal severities.
SELF_DESTRUCT_RULE_ID: str = "self-destruct"
REENTRANCY_RULE_ID: str = "reentrancy"
UNRESTRICTED_MINT_RULE_ID: str = "unrestricted-mint"
DELEGATECALL_RULE_ID: str = "delegatecall"
TX_ORIGIN_RULE_ID: str = "tx-origin-auth"
UNCHECKED_CALL_RULE_ID: str = "unchecked-call"
PRIVILEGED_TRANSFER_RULE_ID: str = "privileged-transfer-control"
CONCENTRATION_RULE_ID: str = "distribution-concentration"
TIMESTAMP_RULE_ID: str = "timestamp-dependency"
UNBOUNDED_LOOP_RULE_ID: str = "unbounded-loop"
OUTDATED_COMPILER_RULE_ID: str = "outdated-compiler"
DEPRECATED_CONSTRUCT_RULE_ID: str = "deprecated-construct"
INLINE_ASSEMBLY_RULE_ID: str = "inline-assembly"
UNVERIFIED_SOURCE_RULE_ID: str = "unverified-source"
SOURCE_UNAVAILABLE_RULE_ID: str = "source-unavailable"

DEFAULT_DETECTORS: tuple[str, ...] = (
    SELF_DESTRUCT_RULE_ID,
    REENTRANCY_RULE_ID,
    UNRESTRICTED_MINT_RULE_ID,
    DELEGATECALL_RULE_ID,
    TX_ORIGIN_RULE_ID,
    UNCHECKED_CALL_RULE_ID,
    PRIVILEGED_TRANSFER_RULE_ID,
    CONCENTRATION_RULE_ID,
    TIMESTAMP_RULE_ID,
    UNBOUNDED_LOOP_RULE_ID,
    OUTDATED_COMPILER_RULE_ID,
    DEPRECATED_CONSTRUCT_RULE_ID,
    INLINE_ASSEMBLY_RULE_ID,
    UNVERIFIED_SOURCE_RULE_ID,
)

# Source preprocessing: comments and string literals are blanked before matching.
SOURCE_NOISE_PATTERN: re.Pattern[str] = re.compile(
    r"(?P<block>/\*.*?\*/)|(?P<line>//[^\n]*)|(?P<string>\"(?:[^\"\\\n]|\\.)*\"|'(?:[^'\\\n]|\\.)*')",
    re.DOTALL,
)
CONTRACT_NAME_PATTERN: re.Pattern[str] = re.compile(r"\b(?:contract|library|interface)\s+([A-Za-z_$][\w$]*)")
MODIFIER_DEFINITION_PATTERN: re.Pattern[str] = re.compile(
    r"\bmodifier\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?:\([^)]*\))?[^{;]*\{"
)

FUNCTION_HEADER_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:function\s+(?P<name>[A-Za-z_$][\w$]*)|(?P<special>constructor|fallback|receive)|function(?=\s*\())\s*"
    r"\((?P<params>[^()]*(?:\([^()]*\)[^()]*)*)\)(?P<header>[^{};]*)\{"
)
VISIBILITY_PATTERN: re.Pattern[str] = re.compile(r"\b(public|external|internal|private)\b")
READ_ONLY_PATTERN: re.Pattern[str] = re.compile(r"\b(view|pure|constant)\b")
PARAM_NAME_PATTERN: re.Pattern[str] = re.compile(r"([A-Za-z_$][\w$]*)\s*$")

# Access guards: a modifier like onlyOwner/onlyRole(...) or an explicit sender check.
GUARD_MODIFIER_PATTERN: re.Pattern[str] = re.compile(r"\bonly[A-Z_]\w*|\bauth\b|\brequiresAuth\b")
GUARD_BODY_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:require|assert|if)\s*\([^;{]*\b(?:msg\.sender|_msgSender\(\))\s*(?:==|!=)"
    r"|\b(?:require|assert|if)\s*\([^;{]*(?:==|!=)\s*(?:msg\.sender|_msgSender\(\))"
    r"|\b_checkOwner\s*\(|\b_checkRole\s*\(|\bhasRole\s*\(|\b_onlyOwner\s*\("
)
OWNER_STYLE_MODIFIER_PATTERN: re.Pattern[str] = re.compile(
    r"\bonly(?:Owner|Admin|Operator|Governance|Controller|Manager)\b"
)
OWNER_STYLE_BODY_PATTERN: re.Pattern[str] = re.compile(
    r"(?:msg\.sender|_msgSender\(\))\s*==\s*(?:owner|_owner|admin|_admin|owner\(\))|\b_checkOwner\s*\("
)
# Privileged guards: the sender must equal a stored address or hold a role.
# Sender checks against address(0) or tx.origin restrict nothing.
PRIVILEGED_BODY_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:require|assert)\s*\([^;{]*(?:msg\.sender|_msgSender\(\))\s*==\s*(?!address\s*\(|tx\.origin)[A-Za-z_$]"
    r"|\b(?:require|assert)\s*\(\s*(?!address\s*\(|tx\.origin)[\w$.]+(?:\[[^\]]*\])*(?:\(\))?\s*==\s*(?:msg\.sender|_msgSender\(\))"
    r"|\bif\s*\([^;{]*(?:msg\.sender|_msgSender\(\))\s*!=\s*(?!address\s*\(|tx\.origin)[A-Za-z_$]"
    r"|\b_checkOwner\s*\(|\b_checkRole\s*\(|\bhasRole\s*\(|\b_onlyOwner\s*\("
)

# Self-destruct.
SELF_DESTRUCT_PATTERN: re.Pattern[str] = re.compile(r"\b(?:selfdestruct|suicide)\s*\(")

# Low-level calls. The optional groups cover ``.call{value: x}(...)`` and ``.call.value(x)(...)``.
VALUE_CALL_PATTERN: re.Pattern[str] = re.compile(
    r"\.call\s*(?:\{[^}]*\}\s*)?(?:\.value\s*\([^)]*\)\s*)?(?:\.gas\s*\([^)]*\)\s*)?\("
)
LOW_LEVEL_CALL_PATTERN: re.Pattern[str] = re.compile(
    r"\.(?:call|send|delegatecall|callcode|staticcall)\s*(?:\{[^}]*\}\s*)?"
    r"(?:\.value\s*\([^)]*\)\s*)?(?:\.gas\s*\([^)]*\)\s*)?\("
)
BALANCE_WRITE_PATTERN: re.Pattern[str] = re.compile(
    r"\b\w*(?:balance|Balance|deposit|Deposit|credit|Credit|shares|Shares)\w*"
    r"(?:\s*\[[^\]]*\])*\s*(?:[-+*/]?=(?!=)|\+\+|--)"
)
REENTRANCY_GUARD_PATTERN: re.Pattern[str] = re.compile(r"\bnonReentrant\b|\bnoReentrancy\b|\block\b")

# Mint. Paid public mints (payable or msg.value checks) are sales, not unrestricted supply.
PAID_MINT_PATTERN: re.Pattern[str] = re.compile(r"\bpayable\b|\bmsg\.value\b")
MINT_FUNCTION_NAME_PATTERN: re.Pattern[str] = re.compile(r"^mint\w*$", re.IGNORECASE)
SUPPLY_INCREASE_PATTERN: re.Pattern[str] = re.compile(
    r"\b_mint\s*\(|\b_?totalSupply\s*(?:\+=|=\s*_?totalSupply\s*\+|=\s*_?totalSupply\.add\s*\()"
)

# Delegatecall.
DELEGATECALL_TARGET_PATTERN: re.Pattern[str] = re.compile(
    r"(?:address\s*\(\s*(?P<wrapped>[A-Za-z_$][\w$]*)\s*\)|(?P<plain>[A-Za-z_$][\w$]*))\s*\.delegatecall\s*\("
)

# tx.origin used in a comparison inside a guard; ``tx.origin == msg.sender`` is an EOA check.
TX_ORIGIN_GUARD_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:require|assert|if)\s*\((?P<cond>[^;{]*\btx\.origin\b[^;{]*)\)"
)
TX_ORIGIN_EOA_CHECK_PATTERN: re.Pattern[str] = re.compile(
    r"\btx\.origin\s*(?:==|!=)\s*(?:msg\.sender|_msgSender\(\))|(?:msg\.sender|_msgSender\(\))\s*(?:==|!=)\s*tx\.origin\b"
)
TX_ORIGIN_PATTERN: re.Pattern[str] = re.compile(r"\btx\.origin\b")

# Pause / blacklist controls.
TRANSFER_CONTROL_FUNCTION_PATTERN: re.Pattern[str] = re.compile(
    r"^(?:pause|unpause|freeze\w*|blacklist\w*|blocklist\w*|addTo(?:Black|Block)list\w*|"
    r"setBlacklist\w*|setBlocklist\w*|ban\w*|deny\w*)$",
    re.IGNORECASE,
)
TRANSFER_FUNCTION_NAMES: frozenset[str] = frozenset(
    {"transfer", "transferFrom", "_transfer", "_beforeTokenTransfer", "_update"}
)
TRANSFER_GATE_PATTERN: re.Pattern[str] = re.compile(
    r"\bwhenNotPaused\b|\bpaused\s*\(\s*\)|\b_requireNotPaused\s*\(|\b\w*(?:[Bb]lack|[Bb]lock)list\w*|\bfrozen\w*|\bisFrozen\w*"
)

# Timestamp dependency.
TIMESTAMP_TOKEN: str = r"(?:block\.timestamp|\bnow\b)"
TIMESTAMP_CONTROL_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:require|assert|if|while)\s*\([^;{]*" + TIMESTAMP_TOKEN
)
TIMESTAMP_RANDOMNESS_PATTERN: re.Pattern[str] = re.compile(
    r"(?:keccak256|sha256|sha3)\s*\([^;]*" + TIMESTAMP_TOKEN + r"|" + TIMESTAMP_TOKEN + r"\s*%"
)

# Loops over a collection length.
LOOP_BOUND_PATTERN: re.Pattern[str] = re.compile(
    r"\b(?:for\s*\([^;]*;[^;]*<=?\s*|while\s*\([^)]*<=?\s*)(?P<collection>[A-Za-z_$][\w$]*)\.length\b"
)
LOCAL_MEMORY_DECL_TEMPLATE: str = r"\b(?:memory|calldata)\s+{name}\b"

# Compiler pragma.
PRAGMA_PATTERN: re.Pattern[str] = re.compile(r"\bpragma\s+solidity\s+(?P<expr>[^;]+);")
PRAGMA_CONSTRAINT_PATTERN: re.Pattern[str] = re.compile(
    r"(?P<op>\^|~|>=|<=|>|<|=)?\s*v?(?P<version>\d+(?:\.\d+){0,2}|\*)"
)
VERSION_STRING_PATTERN: re.Pattern[str] = re.compile(r"^\d+\.\d+\.\d+$")

# Deprecated constructs with safer successors.
DEPRECATED_CONSTRUCTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bsuicide\s*\("), "suicide() (use selfdestruct or remove)"),
    (re.compile(r"\bsha3\s*\("), "sha3() (use keccak256)"),
    (re.compile(r"\.callcode\s*\("), "callcode (use delegatecall)"),
    (re.compile(r"\bblock\.blockhash\s*\("), "block.blockhash() (use blockhash)"),
    (re.compile(r"\bmsg\.gas\b"), "msg.gas (use gasleft())"),
    (re.compile(r"\.call\.value\s*\("), ".call.value() (use .call{value: ...}())"),
)

INLINE_ASSEMBLY_PATTERN: re.Pattern[str] = re.compile(r"\bassembly\s*(?:\"[^\"]*\"\s*)?(?:\([^)]*\)\s*)?\{")
