from typing import Union

from declarationgenerator import primitive_names
from declarationgenerator.model import Type, Function, Path, get_base_types

# Primitive spellings pycparser knows without a typedef
_C_KEYWORD_TYPES = {"void", "char", "short", "int", "long", "float", "double", "signed", "unsigned"}

builtin_typedef_names = set([name for name in primitive_names
                             if not set(name.split(" ")).issubset(_C_KEYWORD_TYPES)])


def typedef_names_for(*declared: Union[Type, Function]) -> set[str]:
    """Names a C parser has to know as typedefs to read back the given declarations."""
    names: set[str] = set()
    for item in declared:
        if isinstance(item, Function):
            types = [argument.type for argument in item.args] + [item.return_type]
        else:
            types = [item]
        for typ in types:
            names.update(base_type.name for base_type in get_base_types(typ)
                         if isinstance(base_type, Path) and base_type.kind is None)
    return names
