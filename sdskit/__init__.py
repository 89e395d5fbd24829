"""Binary-safe dynamic byte strings, argument splitting, TLS contexts and a poll adapter."""

__version__ = "0.1.0"
__all__ = ["sds", "textops", "splitargs", "sslcontext", "poll", "sockcompat"]