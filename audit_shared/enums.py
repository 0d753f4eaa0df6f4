import enum


class PhotoInputKind(str, enum.Enum):
    """Shapes a client may send for an audit's ``photos`` property.

    Used by the photo normalizer to pick exactly one handling branch per value.
    """
    ABSENT = "absent"
    DELIMITED_STRING = "delimited_string"
    JSON_STRING = "json_string"
    OBJECT_LIST = "object_list"
    OTHER = "other"
    SINGLE_OBJECT = "single_object"
    STRING_LIST = "string_list"
