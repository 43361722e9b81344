"""
Tessera Core Package
====================
Pluggable key management shared by every tessera component.

Provides:
- Key managers turning validated key material into primitives
- A process-wide registry of key managers and primitive wrappers
- Primitive sets and wrappers for seamless key rotation
- AEAD, deterministic AEAD, MAC, signature and hybrid encryption families
"""
