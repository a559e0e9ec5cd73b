from dataclasses import dataclass
from enum import Enum

from declarationgenerator import primitive_names_to_c, primitive_names_to_cxx, primitive_names_to_managed


@dataclass(frozen=True)
class DialectConfig:
    """Formatting choices of one target dialect."""
    name: str
    supports_generics: bool
    # Only this dialect distinguishes `f(void)` from `f()`
    explicit_void: bool
    # Fixed arrays become a marshaling attribute instead of `[N]`
    marshal_fixed_arrays: bool
    primitive_names: dict[str, str]
    array_attribute_pattern: str = "[MarshalAs(UnmanagedType.ByValArray, SizeConst={0})] readonly "

    def primitive_name(self, name: str) -> str:
        return self.primitive_names.get(name, name)


class Dialect(Enum):
    C = "c"
    CXX = "c++"
    CS = "c#"

    @property
    def config(self) -> DialectConfig:
        return _DIALECT_CONFIGS[self]

    @staticmethod
    def from_name(name: str) -> 'Dialect':
        dialect = _DIALECT_ALIASES.get(name.strip().lower())
        if dialect is None:
            raise ValueError(f"Unknown dialect {name!r}, expected one of {', '.join(sorted(_DIALECT_ALIASES))}")
        return dialect

    def __str__(self) -> str:
        return self.config.name


_DIALECT_CONFIGS: dict[Dialect, DialectConfig] = {
    Dialect.C: DialectConfig(
        name="C",
        supports_generics=False,
        explicit_void=True,
        marshal_fixed_arrays=False,
        primitive_names=primitive_names_to_c
    ),
    Dialect.CXX: DialectConfig(
        name="C++",
        supports_generics=True,
        explicit_void=False,
        marshal_fixed_arrays=False,
        primitive_names=primitive_names_to_cxx
    ),
    Dialect.CS: DialectConfig(
        name="C#",
        supports_generics=True,
        explicit_void=False,
        marshal_fixed_arrays=True,
        primitive_names=primitive_names_to_managed
    ),
}

_DIALECT_ALIASES: dict[str, Dialect] = {
    "c": Dialect.C,
    "c++": Dialect.CXX,
    "cxx": Dialect.CXX,
    "cpp": Dialect.CXX,
    "c#": Dialect.CS,
    "cs": Dialect.CS,
    "csharp": Dialect.CS,
}
