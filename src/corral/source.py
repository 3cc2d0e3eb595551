"""Source resolution for new containers.

Turns the options a caller passes to ``create`` into exactly one source
descriptor. Everything here is pure so callers find out about bad input
before anything is sent to the control plane.
"""

import logging
from typing import Optional, Union

from corral.errors import ImageIdentifierRequired, InvalidImageAttributes, InvalidProtocol
from corral.models.source import EmptySource, ImageSource, SourceOptions


logger = logging.getLogger(__name__)

PROTOCOLS = ("lxd", "simplestreams")

# Fields that have no meaning for an empty container
IMAGE_ATTRIBUTES = ("alias", "certificate", "fingerprint", "properties", "protocol", "secret", "server")

# Fields that only make sense when pulling from a remote image server
REMOTE_ATTRIBUTES = ("protocol", "certificate", "secret")

# Container settings that may travel with source options but do not select a source
CONTAINER_FIELDS = ("architecture", "config", "devices", "ephemeral", "profiles")


def resolve_source(
    options: Optional[SourceOptions] = None, **kwargs
) -> Union[ImageSource, EmptySource]:
    """Resolve creation options into a source descriptor.

    Options may be passed as a ``SourceOptions`` instance or as keyword
    arguments. When more than one image identifier is given the fingerprint
    wins over the alias, and the alias wins over properties.
    Container settings such as ``config`` or ``profiles`` are accepted and
    left alone.

    Raises:
        InvalidProtocol: protocol is not ``lxd`` or ``simplestreams``.
        InvalidImageAttributes: image fields given with ``empty=True``, or
            remote fields given without a server.
        ImageIdentifierRequired: nothing identifies an image.
    """
    kwargs = {k: v for k, v in kwargs.items() if k not in CONTAINER_FIELDS}
    if options is None:
        options = SourceOptions(**kwargs)
    elif kwargs:
        options = SourceOptions(**{**options.model_dump(), **kwargs})

    if options.protocol is not None and options.protocol not in PROTOCOLS:
        raise InvalidProtocol(options.protocol, PROTOCOLS)

    if options.empty:
        for field in IMAGE_ATTRIBUTES:
            value = getattr(options, field)
            if value is not None:
                raise InvalidImageAttributes(field, value, "not allowed for an empty container")
        return EmptySource()

    if options.server is None:
        for field in REMOTE_ATTRIBUTES:
            value = getattr(options, field)
            if value is not None:
                raise InvalidImageAttributes(field, value, "requires a server")

    if options.fingerprint is not None:
        if options.alias is not None or options.properties is not None:
            logger.debug(f"Fingerprint {options.fingerprint} takes precedence over alias/properties")
        source = ImageSource(fingerprint=options.fingerprint)
    elif options.alias is not None:
        source = ImageSource(alias=options.alias)
    elif options.properties is not None:
        source = ImageSource(properties=options.properties)
    else:
        raise ImageIdentifierRequired()

    if options.server is not None:
        source = source.model_copy(update={
            "mode": "pull",
            "server": options.server,
            "protocol": options.protocol,
            "secret": options.secret,
            "certificate": options.certificate,
        })

    return source
