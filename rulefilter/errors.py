"""Exception types raised while building and running filters."""


class FilterError(Exception):
    """Base class for every error raised by the filter engine."""


class BuildError(FilterError):
    """A filter, condition or executor definition is malformed."""


class AssignmentError(FilterError):
    """An assignment could not be applied to the data it was given."""