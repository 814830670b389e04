from __future__ import annotations

import logging
from collections import Counter

from kicad_spice.exceptions import UnknownPointError
from kicad_spice.geometry import Point
from kicad_spice.models import Net

logger = logging.getLogger(__name__)


class ConnectivityGraph:
    """Point keys mapped onto an append-only list of nets.

    Several points share a net by pointing at the same index. Nets are
    never removed and never merged once they exist.
    """

    def __init__(self):
        self._nets: list[Net] = []
        self._index: dict[Point, int] = {}

    def __contains__(self, point: Point) -> bool:
        return point in self._index

    def __len__(self) -> int:
        return len(self._nets)

    @property
    def nets(self) -> tuple[Net, ...]:
        return tuple(self._nets)

    def net(self, index: int) -> Net:
        return self._nets[index]

    def lookup(self, point: Point) -> int | None:
        return self._index.get(point)

    def net_at(self, point: Point) -> Net | None:
        index = self._index.get(point)
        if index is None:
            return None
        return self._nets[index]

    def touch(self, point: Point, identifier: str | None = None, kind: str = "") -> int:
        """Return the net at ``point``, creating it if the point is new.

        ``identifier`` and ``kind`` only apply to a newly created net.
        """
        index = self._index.get(point)
        if index is not None:
            return index
        self._nets.append(Net(identifier=identifier, kind=kind, point=point))
        index = len(self._nets) - 1
        self._index[point] = index
        return index

    def alias(self, existing: Point, new: Point) -> int:
        index = self._index.get(existing)
        if index is None:
            raise UnknownPointError("cannot alias to an unregistered point", context={"point": existing})
        self._index[new] = index
        return index

    def connect(self, a: Point, b: Point) -> int:
        """Put both ends of a wire on one net."""
        a_index = self._index.get(a)
        b_index = self._index.get(b)
        if a_index is not None and b_index is not None:
            if a_index != b_index:
                logger.debug("wire %r-%r joins nets %d and %d, left unmerged", a, b, a_index, b_index)
            return a_index
        if a_index is not None:
            return self.alias(a, b)
        if b_index is not None:
            return self.alias(b, a)
        index = self.touch(a)
        self._index[b] = index
        return index

    def set_identifier(self, index: int, value: str | None):
        self._nets[index].identifier = value

    def set_kind(self, index: int, value: str):
        self._nets[index].kind = value

    def points_of(self, index: int) -> list[Point]:
        return [point for point, i in self._index.items() if i == index]

    def point_counts(self) -> list[int]:
        """Number of point keys bound to each net, in net-index order."""
        counts = Counter(self._index.values())
        return [counts[i] for i in range(len(self._nets))]
