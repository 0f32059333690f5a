# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

"""Builders for IMAP SEARCH query strings.

>>> str(SearchExpression(Unseen(), Subject("invoice")))
'UNSEEN SUBJECT "invoice"'
>>> str(SearchExpression())
'ALL'
"""

from datetime import date

from imapclient.datetime_util import format_criteria_date

__all__ = [
    "SearchExpression",
    "Condition",
    "All",
    "Answered",
    "Deleted",
    "Flagged",
    "Recent",
    "Seen",
    "Undeleted",
    "Unflagged",
    "Unseen",
    "Subject",
    "From",
    "To",
    "Cc",
    "Body",
    "Text",
    "Since",
    "Before",
    "On",
    "Not",
]


def _quote(value: str) -> str:
    value = value.replace("\\", "\\\\").replace('"', '\\"')
    return '"%s"' % value


class Condition:
    """A single search key. Subclasses set *keyword*."""

    keyword = ""

    def render(self) -> str:
        return self.keyword

    def __str__(self):
        return self.render()

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self.render())


class All(Condition):
    keyword = "ALL"


class Answered(Condition):
    keyword = "ANSWERED"


class Deleted(Condition):
    keyword = "DELETED"


class Flagged(Condition):
    keyword = "FLAGGED"


class Recent(Condition):
    keyword = "RECENT"


class Seen(Condition):
    keyword = "SEEN"


class Undeleted(Condition):
    keyword = "UNDELETED"


class Unflagged(Condition):
    keyword = "UNFLAGGED"


class Unseen(Condition):
    keyword = "UNSEEN"


class _TextCondition(Condition):
    def __init__(self, text: str):
        self.text = text

    def render(self) -> str:
        return "%s %s" % (self.keyword, _quote(self.text))


class Subject(_TextCondition):
    keyword = "SUBJECT"


class From(_TextCondition):
    keyword = "FROM"


class To(_TextCondition):
    keyword = "TO"


class Cc(_TextCondition):
    keyword = "CC"


class Body(_TextCondition):
    keyword = "BODY"


class Text(_TextCondition):
    keyword = "TEXT"


class _DateCondition(Condition):
    def __init__(self, when: date):
        self.when = when

    def render(self) -> str:
        return "%s %s" % (self.keyword, format_criteria_date(self.when).decode("ascii"))


class Since(_DateCondition):
    keyword = "SINCE"


class Before(_DateCondition):
    keyword = "BEFORE"


class On(_DateCondition):
    keyword = "ON"


class Not(Condition):
    """Negate a condition. An expression of several conditions is
    negated as a whole."""

    def __init__(self, condition):
        self.condition = condition

    def render(self) -> str:
        if isinstance(self.condition, SearchExpression) and len(self.condition.conditions) > 1:
            return "NOT (%s)" % self.condition
        return "NOT %s" % self.condition


class SearchExpression:
    """An AND of search conditions.

    Conditions may be :py:class:`Condition` instances or raw strings,
    which are used as is.
    """

    def __init__(self, *conditions):
        self._conditions = list(conditions)

    def add_condition(self, condition) -> "SearchExpression":
        self._conditions.append(condition)
        return self

    @property
    def conditions(self):
        return list(self._conditions)

    def __str__(self):
        if not self._conditions:
            return "ALL"
        return " ".join(str(c) for c in self._conditions)

    def __repr__(self):
        return "<SearchExpression %s>" % self
