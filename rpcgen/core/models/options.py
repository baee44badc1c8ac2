"""
Generator options — the parsed form of the plugin parameter string.

One instance exists per invocation. It is shared, read-only, by the
per-file assembler and the batch aggregator.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Extension used for message headers when no override is given
DEFAULT_MESSAGE_HEADER_EXTENSION = ".pb.h"


class GeneratorOptions(BaseModel):
    """Recognized generation settings.

    Attributes:
        services_namespace:          Extra namespace wrapped around services.
        use_system_headers:          ``<...>`` includes when True, ``"..."`` otherwise.
        grpc_search_path:            Prefix for gRPC headers with local includes.
        generate_mock_code:          Emit ``<name>_mock.grpc.pb.h``.
        gmock_search_path:           Prefix for gmock headers in mock output.
        additional_header_includes:  Extra headers, in order.
        message_header_extension:    Message header suffix ("" = ``.pb.h``).
        include_import_headers:      Include message headers of imports.
    """

    model_config = ConfigDict(frozen=True)

    services_namespace: str = ""
    use_system_headers: bool = True
    grpc_search_path: str = ""
    generate_mock_code: bool = False
    gmock_search_path: str = ""
    additional_header_includes: tuple[str, ...] = ()
    message_header_extension: str = ""
    include_import_headers: bool = False

    @property
    def effective_message_header_extension(self) -> str:
        """Message header suffix with the host default applied."""
        return self.message_header_extension or DEFAULT_MESSAGE_HEADER_EXTENSION
