import pytest

from declarationgenerator.declarator import Declaration, DeclarationBuilder, DeclarationError, PointerDeclarator, \
    ReferenceDeclarator, ArrayDeclarator, FunctionDeclarator
from declarationgenerator.dialect import Dialect
from declarationgenerator.model import Primitive, Path, ConstPtr, Ptr, Ref, MutRef, Array, FuncPtr, Function, \
    FunctionArgument, DeclarationKind, Type

INT = Primitive("int")


def test_primitive_has_no_declarators():
    declaration = Declaration.from_type(INT, Dialect.C)

    assert declaration.declarators == []
    assert declaration.type_name == "int"
    assert declaration.qualifiers == ""
    assert declaration.has_base_type()


def test_declarators_are_ordered_outermost_first():
    declaration = Declaration.from_type(Ptr(Array(INT, "4")), Dialect.C)

    assert declaration.declarators == [PointerDeclarator(False), ArrayDeclarator("4")]


def test_const_pointer_qualifies_pointee_only():
    declaration = Declaration.from_type(ConstPtr(INT), Dialect.C)

    assert declaration.declarators == [PointerDeclarator(False)]
    assert declaration.qualifiers == "const"


def test_const_pointer_to_const_pointer():
    declaration = Declaration.from_type(ConstPtr(ConstPtr(INT)), Dialect.C)

    assert declaration.declarators == [PointerDeclarator(False), PointerDeclarator(True)]
    assert declaration.qualifiers == "const"


def test_mutable_pointer_and_reference_do_not_propagate_const():
    assert Declaration.from_type(Ptr(INT), Dialect.C).qualifiers == ""
    assert Declaration.from_type(MutRef(INT), Dialect.CXX).qualifiers == ""
    assert Declaration.from_type(Ptr(ConstPtr(INT)), Dialect.C).declarators == [
        PointerDeclarator(False), PointerDeclarator(False)
    ]


def test_reference_qualifies_referent():
    declaration = Declaration.from_type(Ref(INT), Dialect.CXX)

    assert declaration.declarators == [ReferenceDeclarator()]
    assert declaration.qualifiers == "const"


def test_array_passes_constness_through():
    declaration = Declaration.from_type(ConstPtr(Array(INT, "N")), Dialect.C)

    assert declaration.declarators == [PointerDeclarator(False), ArrayDeclarator("N")]
    assert declaration.qualifiers == "const"


def test_function_pointer_expands_to_pointer_and_arguments():
    declaration = Declaration.from_type(FuncPtr(INT, [FunctionArgument("a", Ptr(INT))]), Dialect.C)

    pointer, function = declaration.declarators
    assert pointer == PointerDeclarator(False)
    assert isinstance(function, FunctionDeclarator)
    assert not function.layout_vertical
    name, argument = function.args[0]
    assert name == "a"
    assert argument.declarators == [PointerDeclarator(False)]
    assert declaration.type_name == "int"


def test_function_declarator_comes_before_return_type_declarators():
    function = Function("make", [], Ptr(Path("Foo")))

    declaration = Declaration.from_function(function, True, Dialect.C)

    first, second = declaration.declarators
    assert isinstance(first, FunctionDeclarator)
    assert first.layout_vertical
    assert second == PointerDeclarator(False)
    assert declaration.type_name == "Foo"


def test_path_keeps_generics_and_kind():
    declaration = Declaration.from_type(Path("Vec", [INT]), Dialect.CXX)
    assert declaration.generic_args == [INT]

    declaration = Declaration.from_type(Path("Foo", kind=DeclarationKind.STRUCT), Dialect.C)
    assert declaration.kind is DeclarationKind.STRUCT


def test_primitive_names_follow_dialect():
    assert Declaration.from_type(Primitive("uint8_t"), Dialect.C).type_name == "uint8_t"
    assert Declaration.from_type(Primitive("uint8_t"), Dialect.CS).type_name == "byte"
    assert Declaration.from_type(Primitive("my_scalar"), Dialect.CS).type_name == "my_scalar"


def test_additional_mappings_take_precedence():
    builder = DeclarationBuilder(Dialect.C, additional_mappings={"int": "gint"})

    assert builder.build_type(Ptr(INT)).type_name == "gint"


def test_build_dispatches_on_input():
    builder = DeclarationBuilder(Dialect.C)

    assert isinstance(builder.build(Function("f", [], INT)).declarators[0], FunctionDeclarator)
    assert builder.build(Ptr(INT)).declarators == [PointerDeclarator(False)]


def test_second_base_type_is_rejected():
    declaration = Declaration.from_type(INT, Dialect.C)

    with pytest.raises(DeclarationError) as error:
        declaration.set_base_type(Path("Foo"), "Foo", False)

    assert "already has base type 'int'" in str(error.value)
    assert "Foo" in str(error.value)
    assert "dialect C" in str(error.value)
    assert error.value.dialect is Dialect.C


def test_unknown_type_variant_is_rejected():
    with pytest.raises(DeclarationError) as error:
        Declaration.from_type(Ptr(Type()), Dialect.CXX)

    assert "Unhandled type" in str(error.value)
    assert "dialect C++" in str(error.value)


def test_generics_are_rejected_in_c():
    with pytest.raises(DeclarationError) as error:
        Declaration.from_type(Ptr(Path("Vec", [INT])), Dialect.C)

    assert error.value.type == Path("Vec", [INT])
