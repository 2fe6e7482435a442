from .artifact import (
    DESCRIPTOR_EXTENSION,
    SNAPSHOT_MARKER,
    ArtifactCoordinates,
    UploadVersion,
    all_files_pattern,
    check_version,
    descriptor_name,
    files_pattern,
    remote_path,
    snapshot_pattern,
)
from .descriptor import (
    Descriptor,
    descriptor_bytes,
    main_artifact_filename,
    parse_descriptor,
    read_descriptor,
    write_descriptor,
    write_descriptor_file,
)
from .exceptions import (
    ArtifactCacheError,
    ArtifactNameMismatch,
    MainArtifactNotFound,
    MalformedDescriptor,
    MissingMainArtifact,
    TransportError,
    ValidationError,
)
from .models import (
    ArtifactFileSet,
    ArtifactOutcome,
    PublishResult,
    RemoteFile,
    ResolvedVersion,
    TransportResult,
    UploadRecord,
)
from .properties import (
    format_properties,
    matches_properties,
    merge_properties,
    parse_property_args,
    parse_property_pairs,
)

__all__ = [
    "DESCRIPTOR_EXTENSION",
    "SNAPSHOT_MARKER",
    "ArtifactCoordinates",
    "UploadVersion",
    "all_files_pattern",
    "check_version",
    "descriptor_name",
    "files_pattern",
    "remote_path",
    "snapshot_pattern",
    "Descriptor",
    "descriptor_bytes",
    "main_artifact_filename",
    "parse_descriptor",
    "read_descriptor",
    "write_descriptor",
    "write_descriptor_file",
    "ArtifactCacheError",
    "ArtifactNameMismatch",
    "MainArtifactNotFound",
    "MalformedDescriptor",
    "MissingMainArtifact",
    "TransportError",
    "ValidationError",
    "ArtifactFileSet",
    "ArtifactOutcome",
    "PublishResult",
    "RemoteFile",
    "ResolvedVersion",
    "TransportResult",
    "UploadRecord",
    "format_properties",
    "matches_properties",
    "merge_properties",
    "parse_property_args",
    "parse_property_pairs",
]
