primitive_names_to_c = {
    "void": "void",
    "bool": "bool",
    "char": "char",
    "signed char": "signed char",
    "unsigned char": "unsigned char",
    "short": "short",
    "unsigned short": "unsigned short",
    "int": "int",
    "unsigned int": "unsigned int",
    "long": "long",
    "unsigned long": "unsigned long",
    "long long": "long long",
    "unsigned long long": "unsigned long long",
    "float": "float",
    "double": "double",
    "int8_t": "int8_t",
    "int16_t": "int16_t",
    "int32_t": "int32_t",
    "int64_t": "int64_t",
    "uint8_t": "uint8_t",
    "uint16_t": "uint16_t",
    "uint32_t": "uint32_t",
    "uint64_t": "uint64_t",
    "intptr_t": "intptr_t",
    "uintptr_t": "uintptr_t",
    "size_t": "size_t",
    "ptrdiff_t": "ptrdiff_t",
}

primitive_names_to_cxx = dict(primitive_names_to_c)

primitive_names_to_managed = {
    "void": "void",
    "bool": "bool",
    "char": "byte",
    "signed char": "sbyte",
    "unsigned char": "byte",
    "short": "short",
    "unsigned short": "ushort",
    "int": "int",
    "unsigned int": "uint",
    "long": "nint",
    "unsigned long": "nuint",
    "long long": "long",
    "unsigned long long": "ulong",
    "float": "float",
    "double": "double",
    "int8_t": "sbyte",
    "int16_t": "short",
    "int32_t": "int",
    "int64_t": "long",
    "uint8_t": "byte",
    "uint16_t": "ushort",
    "uint32_t": "uint",
    "uint64_t": "ulong",
    "intptr_t": "IntPtr",
    "uintptr_t": "UIntPtr",
    "size_t": "UIntPtr",
    "ptrdiff_t": "IntPtr",
}

primitive_names = set([k for k, v in primitive_names_to_c.items()])
