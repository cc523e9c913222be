"""Heuristic safety scanner for composed SQL.

``SafetyScanner`` runs after a statement has been compiled and before it
reaches the database.  It rejects text that looks like an accident or an
injection:

* **Empty statements.**
* **Forbidden tokens** – ``DROP`` anywhere (case-insensitive) and the
  statement separator ``;``.  Separate statements should be separate calls.
* **Credential wildcards** – ``username = '*'``, ``"password"='*'`` and the
  same shape when the ``*`` arrives as a bound parameter.
* **Tautologies** – any equality after ``WHERE`` whose two operands are the
  same text (``1=1``, ``x = x``, ``'a'='a'``).
* **Custom rules** from a :class:`SafetyPolicy`: regex patterns matched
  against the whole statement (optionally only when it has a ``WHERE``),
  and veto callbacks.

The scanner is a best-effort filter.  It does not guarantee safety and
must not replace parameter binding.

Example, per-application rules::

    policy = SafetyPolicy()
    policy.add_pattern(r"(?i)\\bsleep\\s*\\(")
    policy.add_pattern(r"(?i)\\bor\\b", where=True)
    policy.add_check(lambda sql: "pg_catalog" not in sql)

    db = Database.open("sqlite", "app.db", scanner=SafetyScanner(policy))

Rules registered with :func:`add_safety_check` / :func:`add_safety_pattern`
go to the process-wide :data:`DEFAULT_POLICY`, which every scanner built
without an explicit policy consults.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

#: A veto callback: return ``False`` when the SQL looks unsafe.
SafetyCheck = Callable[[str], bool]

_FORBIDDEN = re.compile(r"DROP|;", re.IGNORECASE)
_WHERE = re.compile(r"\bWHERE\b", re.IGNORECASE)

_QUOTE = r"""["'`]?"""
_CREDENTIAL = r"\b(?:user(?:name|id)?|pass(?:word)?|uid)\b"
_CREDENTIAL_WILDCARD = re.compile(
    rf"{_QUOTE}{_CREDENTIAL}{_QUOTE}\s*=\s*{_QUOTE}\*{_QUOTE}",
    re.IGNORECASE,
)
_EQUALITY = re.compile(
    rf"(?P<left>{_QUOTE}(?P<lname>[\w\-]*){_QUOTE})\s*=\s*"
    rf"(?P<right>{_QUOTE}(?P<rname>[\w\-]*){_QUOTE})",
    re.ASCII,
)
# Single-quoted string literals, with backslash or doubled-quote escapes.
_LITERAL = re.compile(r"'(?:[^'\\]|\\.|'')*'", re.DOTALL)


def _compile(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


@dataclass
class SafetyPolicy:
    """Custom rules consulted by :class:`SafetyScanner` on every scan.

    Registration is append-only and guarded by a lock, so rules can be
    added while other threads are scanning; each scan works on a snapshot
    taken when it starts.

    Attributes:
        checks: Veto callbacks; a ``False`` return marks the SQL unsafe.
        patterns: Regexes searched in the whole statement.
        where_patterns: Regexes searched in the whole statement, but only
            when the statement has a ``WHERE`` clause.
    """

    checks: list[SafetyCheck] = field(default_factory=list)
    patterns: list[re.Pattern[str]] = field(default_factory=list)
    where_patterns: list[re.Pattern[str]] = field(default_factory=list)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.patterns = [_compile(p) for p in self.patterns]
        self.where_patterns = [_compile(p) for p in self.where_patterns]

    def add_check(self, check: SafetyCheck) -> None:
        """Append a veto callback."""
        with self._lock:
            self.checks.append(check)

    def add_pattern(self, pattern: str | re.Pattern[str], where: bool = False) -> None:
        """Append a regex; a match marks the SQL unsafe.

        Args:
            pattern: Regex source or a compiled pattern.
            where: If ``True``, only statements with a ``WHERE`` clause are
                checked against it.
        """
        compiled = _compile(pattern)
        with self._lock:
            if where:
                self.where_patterns.append(compiled)
            else:
                self.patterns.append(compiled)

    def snapshot(
        self,
    ) -> tuple[tuple[SafetyCheck, ...], tuple[re.Pattern[str], ...], tuple[re.Pattern[str], ...]]:
        """Return immutable copies of ``(checks, patterns, where_patterns)``."""
        with self._lock:
            return tuple(self.checks), tuple(self.patterns), tuple(self.where_patterns)


#: Process-wide rules used by scanners constructed without a policy.
DEFAULT_POLICY = SafetyPolicy()


def add_safety_check(check: SafetyCheck) -> None:
    """Register a veto callback on :data:`DEFAULT_POLICY`.

    Return ``False`` from ``check`` if the query looks unsafe, ``True`` to
    continue down the check list.
    """
    DEFAULT_POLICY.add_check(check)


def add_safety_pattern(pattern: str | re.Pattern[str], where: bool = False) -> None:
    """Register a regex on :data:`DEFAULT_POLICY`; matching queries are unsafe."""
    DEFAULT_POLICY.add_pattern(pattern, where=where)


def _has_tautology(text: str) -> bool:
    for m in _EQUALITY.finditer(text):
        # ">= ?" leaves both operands blank; that is not a comparison of two values.
        if m["lname"] == m["rname"] and (m["left"] or m["right"]):
            return True
    return False


class SafetyScanner:
    """Vets composed SQL before execution.

    Args:
        policy: Custom rules; defaults to :data:`DEFAULT_POLICY`.
        placeholder: Positional placeholder used by the database, needed to
            line bound parameters up with the text.
    """

    def __init__(self, policy: SafetyPolicy | None = None, placeholder: str = "?") -> None:
        self._policy = policy if policy is not None else DEFAULT_POLICY
        self._placeholder = placeholder
        self._credential_bound = re.compile(
            rf"{_QUOTE}{_CREDENTIAL}{_QUOTE}\s*=\s*{re.escape(placeholder)}",
            re.IGNORECASE,
        )

    @property
    def policy(self) -> SafetyPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def scan(self, sql: str, params: Sequence[Any] = ()) -> bool:
        """Return ``True`` if ``sql`` passes every check."""
        return self.check(sql, params) is None

    def check(self, sql: str, params: Sequence[Any] = ()) -> str | None:
        """Run the checks in order and report the first failure.

        Args:
            sql: Complete SQL text.
            params: Values bound to the positional placeholders in ``sql``.

        Returns:
            ``None`` when the SQL looks safe, otherwise a short reason:
            ``"empty"``, ``"forbidden_token"``, ``"credential_wildcard"``,
            ``"tautology"``, ``"where_pattern"``, ``"pattern"`` or
            ``"custom_check"``.
        """
        if not sql.strip():
            return "empty"
        if _FORBIDDEN.search(sql):
            return "forbidden_token"

        checks, patterns, where_patterns = self._policy.snapshot()

        where = _WHERE.search(sql)
        if where is not None:
            tail = sql[where.end():]
            if _CREDENTIAL_WILDCARD.search(tail):
                return "credential_wildcard"
            if self._bound_credential_wildcard(sql, where.end(), params):
                return "credential_wildcard"
            if _has_tautology(tail):
                return "tautology"
            if any(p.search(sql) for p in where_patterns):
                return "where_pattern"

        if any(p.search(sql) for p in patterns):
            return "pattern"
        for cb in checks:
            if not cb(sql):
                return "custom_check"
        return None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _bound_credential_wildcard(self, sql: str, start: int, params: Sequence[Any]) -> bool:
        if not params:
            return False
        # Blank out literals so a "?" inside one is not counted as a placeholder.
        text = _LITERAL.sub(lambda lit: " " * len(lit.group()), sql)
        for m in self._credential_bound.finditer(text, start):
            index = text.count(self._placeholder, 0, m.end()) - 1
            if index < len(params):
                value = params[index]
                if isinstance(value, str) and value.strip() == "*":
                    return True
        return False
