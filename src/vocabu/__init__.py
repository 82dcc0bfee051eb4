"""vocabu: vocabulary learning with spaced repetition."""

from vocabu.consts import VERSION

__version__ = VERSION
