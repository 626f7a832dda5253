"""
Origin policy for the Maps Gateway.
Decides which cross-origin callers may use the gateway.
"""

import re
import logging
from typing import List, Optional, Pattern

from utils.error_handlers import PolicyDeniedError

logger = logging.getLogger(__name__)

class OriginRule:
    """A single allow rule evaluated against the request's Origin header."""

    def matches(self, origin: Optional[str]) -> bool:
        raise NotImplementedError

class AbsentOriginRule(OriginRule):
    """Allows requests without an Origin header (curl, mobile apps, servers)."""

    def matches(self, origin: Optional[str]) -> bool:
        return not origin

    def __repr__(self) -> str:
        return 'AbsentOriginRule()'

class PatternOriginRule(OriginRule):
    """Allows origins matching a full regular expression."""

    def __init__(self, pattern: str):
        self.pattern: Pattern = re.compile(pattern)

    def matches(self, origin: Optional[str]) -> bool:
        if not origin:
            return False
        return self.pattern.fullmatch(origin) is not None

    def __repr__(self) -> str:
        return f'PatternOriginRule({self.pattern.pattern!r})'

def localhost_rule() -> PatternOriginRule:
    """http(s)://localhost with an optional port."""
    return PatternOriginRule(r'^https?://localhost(:\d+)?$')

def subdomain_rule(domain: str) -> PatternOriginRule:
    """http(s)://<subdomain>.<domain>, one label of letters, digits or hyphens."""
    return PatternOriginRule(rf'^https?://[a-zA-Z0-9-]+\.{re.escape(domain)}$')

class OriginPolicy:
    """
    Ordered list of allow rules. The first matching rule allows the origin;
    when none matches the origin is denied.
    """

    def __init__(self, rules: Optional[List[OriginRule]] = None):
        self.rules: List[OriginRule] = list(rules or [])

    @classmethod
    def default(cls, domain: str) -> 'OriginPolicy':
        """
        Build the gateway's policy: no origin, localhost on any port, and
        any single-label subdomain of `domain`.
        """
        return cls([
            AbsentOriginRule(),
            localhost_rule(),
            subdomain_rule(domain),
        ])

    def add_rule(self, rule: OriginRule) -> None:
        self.rules.append(rule)

    def is_allowed(self, origin: Optional[str]) -> bool:
        return any(rule.matches(origin) for rule in self.rules)

    def check(self, origin: Optional[str]) -> None:
        """
        Raise PolicyDeniedError if the origin is not allowed.

        Args:
            origin: Value of the Origin header, or None when absent
        """
        if not self.is_allowed(origin):
            logger.warning(f"Origin rejected by CORS policy: {origin}")
            raise PolicyDeniedError()

    @property
    def cors_origins(self) -> List[Pattern]:
        """Compiled patterns handed to Flask-CORS for header emission."""
        return [rule.pattern for rule in self.rules if isinstance(rule, PatternOriginRule)]
