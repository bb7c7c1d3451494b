"""
Sorted Set representation for FauxRedis.

Sorted Sets store members with scores, maintaining both:
- Fast score lookup via dict: {member: score}
- Sorted order via list: [(score, member), ...]

The two parts must always describe the same membership. Every mutation
goes through add()/remove() so they are updated together; a disagreement
means the store itself is broken and raises IncoherentError.
"""

import bisect

from fauxredis.exceptions import IncoherentError


class SortedSet:
    """
    Member -> score mapping plus the (score, member) ordering.
    """

    __slots__ = ('scores', 'ordered')

    def __init__(self):
        self.scores = {}    # member -> float
        self.ordered = []   # [(score, member), ...] sorted

    def __len__(self):
        return len(self.scores)

    def __contains__(self, member):
        return member in self.scores

    def is_empty(self):
        """
        Check emptiness of both parts.

        Raises:
            IncoherentError: If exactly one of the parts is empty
        """
        if not self.ordered:
            if self.scores:
                raise IncoherentError()
            return True
        if not self.scores:
            raise IncoherentError()
        return False

    def check_coherence(self):
        """
        Verify that both parts hold the same members with the same scores.

        Raises:
            IncoherentError: On any disagreement
        """
        if len(self.ordered) != len(self.scores):
            raise IncoherentError()
        for score, member in self.ordered:
            if self.scores.get(member) != score:
                raise IncoherentError()

    def add(self, member, score):
        """
        Insert a member or update its score.

        Args:
            member: str - Member name
            score: float - Score

        Returns:
            bool: True if the member is new
        """
        old_score = self.scores.get(member)
        if old_score is not None:
            if old_score == score:
                return False
            self._unlink(old_score, member)
        self.scores[member] = score
        bisect.insort(self.ordered, (score, member))
        return old_score is None

    def remove(self, member):
        """
        Remove a member.

        Returns:
            bool: True if the member was present
        """
        score = self.scores.pop(member, None)
        if score is None:
            return False
        self._unlink(score, member)
        return True

    def _unlink(self, score, member):
        # Binary search for (score, member) in the ordering
        target = (score, member)
        idx = bisect.bisect_left(self.ordered, target)
        if idx < len(self.ordered) and self.ordered[idx] == target:
            del self.ordered[idx]
        else:
            raise IncoherentError()

    def score(self, member):
        return self.scores.get(member)

    def rank(self, member):
        """
        Get rank (0-based index) of member, lowest score first.

        Returns:
            int | None: Rank or None if member doesn't exist
        """
        score = self.scores.get(member)
        if score is None:
            return None
        target = (score, member)
        idx = bisect.bisect_left(self.ordered, target)
        if idx < len(self.ordered) and self.ordered[idx] == target:
            return idx
        raise IncoherentError()

    def members(self):
        """Members in (score, member) order."""
        return [member for _, member in self.ordered]

    def __eq__(self, other):
        if isinstance(other, SortedSet):
            return self.ordered == other.ordered
        return NotImplemented

    def __repr__(self):
        return f'SortedSet({self.ordered!r})'
