"""Position model: sides, pieces, coordinates, moves and the immutable board.

Row 0 is the top of the board (Black's back rank, label 8) and row
``SIZE - 1`` is White's back rank (label 1). Columns run left to right, A to H.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

SIZE = 8


class Side(Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE

    @property
    def direction(self) -> int:
        """Row step of a pawn advance for this side."""
        return -1 if self is Side.WHITE else 1

    @property
    def pawn_row(self) -> int:
        """Row the side's pawns start on (the only row a double step is allowed from)."""
        return SIZE - 2 if self is Side.WHITE else 1


class PieceKind(Enum):
    PAWN = "pawn"
    ROOK = "rook"
    BISHOP = "bishop"
    KNIGHT = "knight"
    KING = "king"
    QUEEN = "queen"


KIND_SYMBOLS: Dict[PieceKind, str] = {
    PieceKind.PAWN: "P",
    PieceKind.ROOK: "R",
    PieceKind.BISHOP: "B",
    PieceKind.KNIGHT: "N",
    PieceKind.KING: "K",
    PieceKind.QUEEN: "Q",
}
SYMBOL_KINDS: Dict[str, PieceKind] = {v: k for k, v in KIND_SYMBOLS.items()}


@dataclass(frozen=True)
class Piece:
    """A (side, kind) pair. ``EMPTY`` is the piece with neither."""

    side: Optional[Side]
    kind: Optional[PieceKind]

    @property
    def is_empty(self) -> bool:
        return self.kind is None

    @property
    def symbol(self) -> str:
        if self.kind is None:
            return "."
        sym = KIND_SYMBOLS[self.kind]
        return sym if self.side is Side.WHITE else sym.lower()

    @classmethod
    def from_symbol(cls, sym: str) -> "Piece":
        if sym == ".":
            return EMPTY
        kind = SYMBOL_KINDS.get(sym.upper())
        if kind is None:
            raise ValueError(f"Unknown piece symbol: {sym!r}")
        return cls(Side.WHITE if sym.isupper() else Side.BLACK, kind)


EMPTY = Piece(None, None)


@dataclass(frozen=True)
class Coordinate:
    row: int
    col: int

    def offset(self, drow: int, dcol: int) -> "Coordinate":
        return Coordinate(self.row + drow, self.col + dcol)


@dataclass(frozen=True)
class Move:
    """A start/target pair. Construction does not check the rules."""

    start: Coordinate
    target: Coordinate


def is_on_board(pos: Coordinate) -> bool:
    return 0 <= pos.row < SIZE and 0 <= pos.col < SIZE


# Every square in board-scan order (row-major, ascending).
POSITIONS: Tuple[Coordinate, ...] = tuple(
    Coordinate(row, col) for row in range(SIZE) for col in range(SIZE)
)

BACK_RANK: Tuple[PieceKind, ...] = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


class Board:
    """Immutable SIZE x SIZE grid of pieces.

    Rows are stored as tuples, so a derived board only rebuilds the rows a
    move touches and shares the rest with its parent.
    """

    __slots__ = ("_rows",)

    def __init__(self, rows: Iterable[Iterable[Piece]]):
        built = tuple(tuple(row) for row in rows)
        if len(built) != SIZE or any(len(row) != SIZE for row in built):
            raise ValueError(f"Board must be {SIZE}x{SIZE}")
        self._rows = built

    @classmethod
    def _from_rows(cls, rows: Tuple[Tuple[Piece, ...], ...]) -> "Board":
        board = cls.__new__(cls)
        board._rows = rows
        return board

    @classmethod
    def empty(cls) -> "Board":
        return cls._from_rows(tuple((EMPTY,) * SIZE for _ in range(SIZE)))

    @classmethod
    def initial(cls) -> "Board":
        """Standard opening setup, Black on rows 0-1 and White on rows 6-7."""
        rows: List[Tuple[Piece, ...]] = [(EMPTY,) * SIZE for _ in range(SIZE)]
        for side, back_row in ((Side.BLACK, 0), (Side.WHITE, SIZE - 1)):
            rows[back_row] = tuple(Piece(side, kind) for kind in BACK_RANK)
            rows[side.pawn_row] = (Piece(side, PieceKind.PAWN),) * SIZE
        return cls._from_rows(tuple(rows))

    @classmethod
    def from_diagram(cls, diagram: str) -> "Board":
        """Parse the text produced by ``str(board)`` (whitespace is ignored)."""
        lines = [line.split() for line in diagram.strip().splitlines() if line.strip()]
        return cls([[Piece.from_symbol(sym) for sym in line] for line in lines])

    @property
    def rows(self) -> Tuple[Tuple[Piece, ...], ...]:
        return self._rows

    def tile_at(self, pos: Coordinate) -> Piece:
        """Piece on ``pos``. Callers must check ``is_on_board`` first."""
        if not is_on_board(pos):
            raise IndexError(f"Coordinate off the board: {pos}")
        return self._rows[pos.row][pos.col]

    def is_tile_clear(self, pos: Coordinate) -> bool:
        return is_on_board(pos) and self._rows[pos.row][pos.col].is_empty

    def is_tile_occupied_by(self, side: Side, pos: Coordinate) -> bool:
        return is_on_board(pos) and self._rows[pos.row][pos.col].side is side

    def pieces(self, side: Optional[Side] = None) -> Iterator[Tuple[Coordinate, Piece]]:
        """Yield (position, piece) for occupied squares in board-scan order."""
        for pos in POSITIONS:
            piece = self._rows[pos.row][pos.col]
            if piece.is_empty:
                continue
            if side is None or piece.side is side:
                yield pos, piece

    def find(self, piece: Piece) -> Optional[Coordinate]:
        for pos in POSITIONS:
            if self._rows[pos.row][pos.col] == piece:
                return pos
        return None

    def with_tiles(self, updates: Dict[Coordinate, Piece]) -> "Board":
        """Return a new board with ``updates`` applied; untouched rows are shared."""
        rows = list(self._rows)
        touched: Dict[int, List[Piece]] = {}
        for pos, piece in updates.items():
            if not is_on_board(pos):
                raise IndexError(f"Coordinate off the board: {pos}")
            if pos.row not in touched:
                touched[pos.row] = list(rows[pos.row])
            touched[pos.row][pos.col] = piece
        for row, cells in touched.items():
            rows[row] = tuple(cells)
        return Board._from_rows(tuple(rows))

    def apply_move(self, move: Move) -> "Board":
        """Relocate the piece on ``move.start`` to ``move.target``.

        A pawn arriving on either back rank becomes a queen of its side. No rule
        checking is done here; validate with ``rules`` first.
        """
        moved = self.tile_at(move.start)
        if moved.kind is PieceKind.PAWN and move.target.row in (0, SIZE - 1):
            moved = Piece(moved.side, PieceKind.QUEEN)
        return self.with_tiles({move.start: EMPTY, move.target: moved})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __str__(self) -> str:
        return "\n".join(" ".join(piece.symbol for piece in row) for row in self._rows)

    def __repr__(self) -> str:
        return f"Board({str(self)!r})"
