r"""
Single import point for the ORM models of the foundation services.

    from social_core.models import Post, Profile, PostReport, PostImpression, Impression

Importing this package also registers every table on `Base.metadata`, which
`create_all` relies on.
"""

from .post import Post
from .profile import Profile
from .post_report import PostReport
from .post_impression import PostImpression, Impression

__all__ = [
    "Post",
    "Profile",
    "PostReport",
    "PostImpression",
    "Impression",
]
