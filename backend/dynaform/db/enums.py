import enum


class FieldType(str, enum.Enum):
    text = "TEXT"
    list = "LIST"
    radio = "RADIO"


class Gender(str, enum.Enum):
    male = "Male"
    female = "Female"
    others = "Others"


# Field types whose default value is an index into the option list
OPTION_FIELD_TYPES = {FieldType.list, FieldType.radio}
