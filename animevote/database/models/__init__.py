from .quarter import Quarter
from .season import Season, SeasonType
from .week import Week, VoteStatus
from .anime import Anime, AnimeSeason, Episode
from .candidate import AnimeCandidate
from .vote import WeekVoteSubmission, Ballot, BallotType, EpisodeStar

__all__ = [
    "Quarter",
    "Season",
    "SeasonType",
    "Week",
    "VoteStatus",
    "Anime",
    "AnimeSeason",
    "Episode",
    "AnimeCandidate",
    "WeekVoteSubmission",
    "Ballot",
    "BallotType",
    "EpisodeStar",
]
