"""Source Comments — leading proto comments indexed by element full name.

Invariants:
    - Keys are descriptor full names ("pkg.Message.field", "pkg.Service.Method")
    - Only leading comments are kept; trailing and detached comments are ignored
    - normalize_comment() is the single whitespace policy for descriptions

Design Decisions:
    - Comments live only in FileDescriptorProto.source_code_info, so the index
      is built from file protos and looked up by the runtime descriptors' names
    - Read-only Mapping: the schema builder only needs .get()
"""

from collections.abc import Iterator, Mapping

from google.protobuf.descriptor_pb2 import DescriptorProto, FileDescriptorProto


# FileDescriptorProto / DescriptorProto / ServiceDescriptorProto field numbers
_FILE_MESSAGE = 4
_FILE_SERVICE = 6
_MESSAGE_FIELD = 2
_MESSAGE_NESTED = 3
_SERVICE_METHOD = 2


def normalize_comment(comment: str) -> str:
    """Trim each line, drop blank lines, join with single spaces."""
    lines = (line.strip() for line in comment.splitlines())
    return " ".join(line for line in lines if line)


class SourceComments(Mapping[str, str]):
    """Leading comments of fields, services and methods across proto files."""

    def __init__(self, comments: Mapping[str, str] | None = None):
        self._comments = dict(comments or {})

    @classmethod
    def from_file_proto(cls, file_proto: FileDescriptorProto) -> "SourceComments":
        paths = _index_element_paths(file_proto)
        comments = {}
        for location in file_proto.source_code_info.location:
            name = paths.get(tuple(location.path))
            if name and location.leading_comments:
                comments[name] = location.leading_comments
        return cls(comments)

    @classmethod
    def from_file_protos(cls, file_protos) -> "SourceComments":
        merged: dict[str, str] = {}
        for file_proto in file_protos:
            merged.update(cls.from_file_proto(file_proto))
        return cls(merged)

    def leading(self, full_name: str) -> str:
        return self._comments.get(full_name, "")

    def __getitem__(self, full_name: str) -> str:
        return self._comments[full_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._comments)

    def __len__(self) -> int:
        return len(self._comments)


def _index_element_paths(file_proto: FileDescriptorProto) -> dict[tuple, str]:
    """Map source_code_info paths to full names for messages, fields, services, methods."""
    prefix = f"{file_proto.package}." if file_proto.package else ""
    paths: dict[tuple, str] = {}
    for i, message in enumerate(file_proto.message_type):
        _index_message(message, (_FILE_MESSAGE, i), prefix, paths)
    for i, service in enumerate(file_proto.service):
        service_name = prefix + service.name
        paths[(_FILE_SERVICE, i)] = service_name
        for j, method in enumerate(service.method):
            paths[(_FILE_SERVICE, i, _SERVICE_METHOD, j)] = f"{service_name}.{method.name}"
    return paths


def _index_message(
    message: DescriptorProto, path: tuple, prefix: str, paths: dict[tuple, str],
) -> None:
    full_name = prefix + message.name
    paths[path] = full_name
    for i, field in enumerate(message.field):
        paths[path + (_MESSAGE_FIELD, i)] = f"{full_name}.{field.name}"
    for i, nested in enumerate(message.nested_type):
        _index_message(nested, path + (_MESSAGE_NESTED, i), full_name + ".", paths)
