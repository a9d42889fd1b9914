"""
Hack Symbol Table
=================

Every compilation owns a fresh SymbolTable seeded from PREDEFINED_SYMBOLS.
Labels are bound while parsing; variables are allocated afterwards, from
address 16 upwards, in order of first appearance. Once resolution is done
the table is frozen and any further binding is an internal error.

Predefined Symbols
------------------
| Name          | Address     |
|---------------|-------------|
| SP            | 0           |
| LCL           | 1           |
| ARG           | 2           |
| THIS          | 3           |
| THAT          | 4           |
| R0 .. R15     | 0 .. 15     |
| SCREEN        | 16384       |
| KBD           | 24576       |
"""

from enum import Enum, auto
from types import MappingProxyType
from typing import Iterator, Optional

from hack_asm.errors import InternalAssemblerError


PREDEFINED_SYMBOLS = MappingProxyType({
    "SP": 0,
    "LCL": 1,
    "ARG": 2,
    "THIS": 3,
    "THAT": 4,
    **{f"R{n}": n for n in range(16)},
    "SCREEN": 0x4000,
    "KBD": 0x6000,
})

# First RAM address handed out to variables
VARIABLE_BASE_ADDRESS = 16


class SymbolKind(Enum):
    PREDEFINED = auto()
    LABEL = auto()
    VARIABLE = auto()


class SymbolTable:
    """
    Name -> address map for one compilation.

    Usage:
        symbols = SymbolTable()
        symbols.define_label("LOOP", 4)
        address = symbols.resolve("counter")   # allocates 16
        symbols.freeze()
    """

    def __init__(self):
        self._addresses: dict[str, int] = dict(PREDEFINED_SYMBOLS)
        self._kinds: dict[str, SymbolKind] = {
            name: SymbolKind.PREDEFINED for name in PREDEFINED_SYMBOLS
        }
        self._next_variable = VARIABLE_BASE_ADDRESS
        self._frozen = False

    def __contains__(self, name: str) -> bool:
        return name in self._addresses

    def __getitem__(self, name: str) -> int:
        return self._addresses[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._addresses)

    def __len__(self) -> int:
        return len(self._addresses)

    def get(self, name: str) -> Optional[int]:
        return self._addresses.get(name)

    def kind(self, name: str) -> Optional[SymbolKind]:
        return self._kinds.get(name)

    def is_predefined(self, name: str) -> bool:
        return self._kinds.get(name) is SymbolKind.PREDEFINED

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def next_variable_address(self) -> int:
        return self._next_variable

    # =========================================================================
    # Binding
    # =========================================================================

    def define_label(self, name: str, address: int) -> None:
        """
        Bind a label to an instruction address.

        The caller checks for an existing binding first; rebinding here
        would silently replace the first definition.

        Raises:
            InternalAssemblerError: If the table is frozen or already has name
        """
        self._check_mutable()
        if name in self._addresses:
            raise InternalAssemblerError(f"symbol '{name}' is already bound")
        self._addresses[name] = address
        self._kinds[name] = SymbolKind.LABEL

    def resolve(self, name: str) -> int:
        """
        Return the address of name, allocating a new variable if unbound.

        Variables are numbered consecutively from VARIABLE_BASE_ADDRESS.
        """
        address = self._addresses.get(name)
        if address is not None:
            return address

        self._check_mutable()
        address = self._next_variable
        self._next_variable += 1
        self._addresses[name] = address
        self._kinds[name] = SymbolKind.VARIABLE
        return address

    def freeze(self) -> None:
        """Disallow any further bindings."""
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise InternalAssemblerError("symbol table is frozen")

    # =========================================================================
    # Views
    # =========================================================================

    def as_dict(self) -> dict[str, int]:
        """Return a copy of every binding, predefined symbols included."""
        return dict(self._addresses)

    def user_symbols(self) -> dict[str, int]:
        """Return labels and variables, in binding order."""
        return {
            name: address
            for name, address in self._addresses.items()
            if self._kinds[name] is not SymbolKind.PREDEFINED
        }
