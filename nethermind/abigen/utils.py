def camel_to_snake(name: str) -> str:
    """
    Converts camel case to snake case.  Used to derive Python method names from ABI function & event names
    :param name: name to convert
    :return: snake case name
    """
    if not name:
        return name

    out_string = ""
    last_char = name[0]
    for char in name[1:]:
        if char.isupper():
            if last_char.islower() or last_char.isnumeric():
                out_string += last_char + "_"
            else:
                out_string += last_char.lower()
        elif char.isnumeric():
            if last_char.isalpha():
                out_string += last_char.lower() + "_"
            else:
                out_string += last_char.lower()
        else:
            out_string += last_char.lower()
        last_char = char

    out_string += last_char.lower()
    return out_string


def pascal_case(name: str) -> str:
    """
    Upper cases the first character of a name, leaving the rest untouched

    >>> pascal_case("transfer")
    'Transfer'
    """
    return name[:1].upper() + name[1:]
