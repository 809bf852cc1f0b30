"""MIME codecs -- paired parse/serialize functions per content type.

Built-in codecs installed by
:meth:`~fluentreq.registry.MimeRegistry.install_builtin_codecs`:

======================================  ===================
MIME type                               Codec
======================================  ===================
``application/json``                    :class:`JsonCodec`
``application/xml``                     :class:`XmlCodec`
``application/x-www-form-urlencoded``   :class:`FormCodec`
``text/csv``                            :class:`CsvCodec`
======================================  ===================

:class:`YamlCodec` ships with the package but is only registered by hand
or through the ``enable_yaml`` configuration setting.
Any other content type resolves to the passthrough :class:`Codec`.
"""

from fluentreq.codecs.base import Codec, strip_bom
from fluentreq.codecs.csv_codec import CsvCodec
from fluentreq.codecs.form_codec import FormCodec
from fluentreq.codecs.json_codec import JsonCodec
from fluentreq.codecs.xml_codec import XmlCodec
from fluentreq.codecs.yaml_codec import YamlCodec

__all__ = [
    "Codec",
    "CsvCodec",
    "FormCodec",
    "JsonCodec",
    "XmlCodec",
    "YamlCodec",
    "strip_bom",
]
