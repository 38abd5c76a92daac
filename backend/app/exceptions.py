"""Matching engine exceptions"""


class HousingError(Exception):
    """Base exception"""
    pass


class InvalidFilterError(HousingError):
    """A search filter value cannot be interpreted (e.g. unparseable move-in date)"""
    pass


class InvalidRecordError(HousingError):
    """A user or listing payload cannot be converted to a domain object"""
    pass
