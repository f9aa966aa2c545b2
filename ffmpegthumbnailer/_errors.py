"""Errors raised by the thumbnailer.

Configuration mistakes (:class:`ConfigurationError`) are raised before any
file is touched; everything that goes wrong while decoding, encoding or
writing is a :class:`ProcessingError`.
"""

EMPTY_EXTENSION = '<empty>'


class ThumbnailerError(Exception):
    pass


class ConfigurationError(ThumbnailerError):
    pass


class InvalidSeekPercentage(ConfigurationError):
    def __init__(self, value):
        super(InvalidSeekPercentage, self).__init__(
            'Seek percentage must be a value between 0.0 and 1.0, got {!r}'.format(value)
        )
        self.value = value


class InvalidQuality(ConfigurationError):
    def __init__(self, value):
        super(InvalidQuality, self).__init__(
            'Quality must be a value between 0.0 and 100.0, got {!r}'.format(value)
        )
        self.value = value


class InvalidConfiguration(ConfigurationError):
    def __init__(self, errors):
        super(InvalidConfiguration, self).__init__(
            'Invalid thumbnailer configuration: {}'.format(
                '; '.join(str(e) for e in errors)
            )
        )
        self.errors = list(errors)


class UnsupportedExtension(ThumbnailerError):
    def __init__(self, extension):
        super(UnsupportedExtension, self).__init__(
            'Unsupported output extension: {}'.format(extension)
        )
        self.extension = extension


class ProcessingError(ThumbnailerError):
    pass


class DecoderError(ProcessingError):
    def __init__(self, message, stderr=None):
        super(DecoderError, self).__init__(message)
        self.stderr = stderr


class OpenFailed(DecoderError):
    pass


class DecodeFailed(DecoderError):
    pass


class SeekFailed(DecoderError):
    pass


class EncodeFailed(ProcessingError):
    pass


class IoFailed(ProcessingError):
    pass


class TaskFailed(ProcessingError):
    pass


__all__ = [
    'ConfigurationError',
    'DecodeFailed',
    'DecoderError',
    'EMPTY_EXTENSION',
    'EncodeFailed',
    'InvalidConfiguration',
    'InvalidQuality',
    'InvalidSeekPercentage',
    'IoFailed',
    'OpenFailed',
    'ProcessingError',
    'SeekFailed',
    'TaskFailed',
    'ThumbnailerError',
    'UnsupportedExtension',
]
