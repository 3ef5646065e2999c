"""pyreqwest-easy - Composable interceptors for the pyreqwest HTTP client.

Inspired by the axios interceptor ecosystem and built on [pyreqwest](https://github.com/MarkusSintonen/pyreqwest).

Features:
- Transparent token refresh with single-flight de-duplication and replay of blocked requests
- Normalization of backend response envelopes into a single success/failure contract
- Consistent, localizable user-facing error messages for transport and HTTP failures
- Request payload normalization (trim, drop absent values, empty string to null)
- qs-compatible query string serialization with configurable array formats
- Declarative client assembly with ejectable request/response interceptors
- Mocking and testing utilities via a pytest plugin
"""
