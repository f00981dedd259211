"""Domain layer: the pure time-resource engine.

Nothing in this package performs I/O. The current instant is always
supplied by an injected :class:`~chronoform.domain.clock.Clock`.
"""
