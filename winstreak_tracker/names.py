import re

_SPACES = re.compile(r" {2,}")


def normalize_name(stem):
    """Turn a portrait file stem into a display name.

    "TheNurse" -> "The Nurse", "The_Trapper" -> "The Trapper".
    All-caps stems such as "THENURSE" are left alone.
    """
    name = stem.replace("_", " ")
    if any(c.islower() for c in name):
        chars = []
        for c in name:
            if c.isupper() and chars and chars[-1].islower():
                chars.append(" ")
            chars.append(c)
        name = "".join(chars)
    return _SPACES.sub(" ", name).strip()
