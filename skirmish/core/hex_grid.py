"""
Hex grid bookkeeping for the combat core.

Positions are axial hex coordinates. Only the arithmetic needed for range and
movement-cost checks lives here; there is no rendering or pathfinding.
"""

from pydantic import BaseModel, ConfigDict, Field

# Axial neighbour offsets, clockwise starting east.
HEX_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)


class HexCoord(BaseModel):
    """An axial coordinate on the combat grid."""

    model_config = ConfigDict(frozen=True)

    q: int = Field(default=0, description="Axial column.")
    r: int = Field(default=0, description="Axial row.")

    @property
    def s(self) -> int:
        """The implicit third cube coordinate."""
        return -self.q - self.r

    def distance_to(self, other: "HexCoord") -> int:
        """
        Returns the number of hex steps between two coordinates.

        Args:
            other (HexCoord): The other coordinate.

        Returns:
            int: The hex distance.

        """
        return (
            abs(self.q - other.q) + abs(self.r - other.r) + abs(self.s - other.s)
        ) // 2

    def neighbors(self) -> list["HexCoord"]:
        """Returns the six adjacent coordinates."""
        return [HexCoord(q=self.q + dq, r=self.r + dr) for dq, dr in HEX_DIRECTIONS]

    def step_toward(self, other: "HexCoord") -> "HexCoord":
        """
        Returns the neighbour that gets closest to another coordinate.

        Ties are broken by direction order so the result is deterministic.
        """
        if self == other:
            return self
        return min(self.neighbors(), key=lambda n: n.distance_to(other))

    def __str__(self) -> str:
        return f"({self.q}, {self.r})"


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """Returns the number of hex steps between two coordinates."""
    return a.distance_to(b)
