"""Pure display derivations: colors, path / text shortening, labels.

Every function here is deterministic and stateless, so the rendering layer
can call them freely.  Import the submodules directly.
"""
