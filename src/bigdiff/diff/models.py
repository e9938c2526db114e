"""Edit script data model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple


class OpKind(str, Enum):
    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class Op:
    """A run of lines sharing one edit kind."""

    kind: OpKind
    lines: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class EditScript:
    """Ordered runs aligning a base and a target line sequence.

    EQUAL + DELETE lines, in order, give back the base; EQUAL + INSERT lines,
    in order, give back the target.
    """

    ops: Tuple[Op, ...] = ()

    def __iter__(self) -> Iterator[Op]:
        return iter(self.ops)

    def __len__(self) -> int:
        return len(self.ops)

    def base_lines(self) -> List[str]:
        return [line for op in self.ops if op.kind != OpKind.INSERT for line in op.lines]

    def target_lines(self) -> List[str]:
        return [line for op in self.ops if op.kind != OpKind.DELETE for line in op.lines]

    @property
    def inserted(self) -> int:
        return sum(len(op) for op in self.ops if op.kind == OpKind.INSERT)

    @property
    def deleted(self) -> int:
        return sum(len(op) for op in self.ops if op.kind == OpKind.DELETE)

    @property
    def is_identity(self) -> bool:
        """True when no line was inserted or deleted."""
        return all(op.kind == OpKind.EQUAL for op in self.ops)
