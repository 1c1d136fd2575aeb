"""rsync-style include/exclude filter rules.

LocalPathSyncer uses these rules to decide which entries take part in a
mirror, matching what rsync does with repeated --include/--exclude flags:

- rules are checked in order and the first matching rule wins;
- a pattern starting with '/' is anchored at the transfer root, any other
  pattern may match at any directory boundary (so 'foo' matches 'a/foo');
- a trailing '/' restricts the rule to directories;
- '*' stops at '/', '**' crosses it, and 'dir/***' matches 'dir' itself as
  well as everything below it.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern


def _translate(body: str) -> str:
    """Translate a glob body into a regular expression fragment."""
    out = []
    i = 0
    n = len(body)
    while i < n:
        char = body[i]
        if body.startswith('/***', i) and i + 4 == n:
            out.append('(/.*)?')
            i += 4
        elif body.startswith('**', i):
            out.append('.*')
            i += 2
        elif char == '*':
            out.append('[^/]*')
            i += 1
        elif char == '?':
            out.append('[^/]')
            i += 1
        elif char == '[':
            end = body.find(']', i + 1)
            if end == -1:
                out.append(re.escape(char))
                i += 1
            else:
                klass = body[i + 1:end]
                if klass.startswith('!'):
                    klass = '^' + klass[1:]
                out.append(f'[{klass}]')
                i = end + 1
        else:
            out.append(re.escape(char))
            i += 1
    return ''.join(out)


@dataclass
class FilterRule:
    """One include or exclude rule."""
    pattern: str
    include: bool
    regex: Pattern[str]
    dir_only: bool

    @classmethod
    def compile(cls, pattern: str, include: bool) -> "FilterRule":
        body = pattern
        dir_only = body.endswith('/') and not body.endswith('**/')
        if dir_only:
            body = body.rstrip('/')
        if body.startswith('/'):
            prefix = '^'
            body = body[1:]
        else:
            prefix = '^(?:.*/)?'
        return cls(
            pattern=pattern,
            include=include,
            regex=re.compile(prefix + _translate(body) + '$'),
            dir_only=dir_only,
        )

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        return self.regex.match(rel_path) is not None


class FilterRules:
    """Ordered include-then-exclude rule list.

    Example:
        >>> rules = FilterRules(include=["build/keep.txt"], exclude=["build/**"])
        >>> rules.is_included("build/keep.txt", is_dir=False)
        True
        >>> rules.is_included("build/out.o", is_dir=False)
        False
    """

    def __init__(self, include: Optional[List[str]] = None, exclude: Optional[List[str]] = None):
        self.rules = [FilterRule.compile(p, True) for p in include or []]
        self.rules += [FilterRule.compile(p, False) for p in exclude or []]

    def is_included(self, rel_path: str, is_dir: bool) -> bool:
        """Return whether rel_path (relative to the transfer root) is transferred.

        Entries that match no rule are included.
        """
        for rule in self.rules:
            if rule.matches(rel_path, is_dir):
                return rule.include
        return True
