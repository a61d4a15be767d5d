"""tubeport — move YouTube subscriptions, playlists and watch history
between the export formats of different front-ends.

Built around a set of pure format codecs with a strict layered architecture.
"""

from tubeport.version import __version__

__all__: list[str] = ["__version__"]
