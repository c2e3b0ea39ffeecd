"""
NDB models for the bookshelf.

    The data model is as follows:

    Book:
        title : string
        author : string
        publishedDate : string
        description : text (not indexed)
        createdBy : string
        createdById : string # Id of the user who added the book
        imageUrl : string (optional)

    The Python attribute names are snake_case; the stored property
    names are the camelCase names shared with the other bookshelf
    samples, so existing data remains readable.

    According to the NDB documentation, an ideal index for a query
    should contain - in the order given:
    1) Properties used in equality filters
    2) Property used in an inequality filter (only one allowed)
    3) Properties used for ordering

    Listing a user's books filters on createdById and orders by
    title, which requires the composite index declared in index.yaml.

"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Optional,
    Tuple,
    Type,
    TypeVar,
    cast,
)

from google.cloud import ndb  # type: ignore

from ..protocols import BOOK_KIND, BOOK_PROPERTIES


_T_Model = TypeVar("_T_Model", bound=ndb.Model)


class Query(Generic[_T_Model], ndb.Query):
    """A type-safer wrapper around ndb.Query"""

    # This class is included for type checking only. At run-time,
    # query instances are of type ndb.Query, not of this class.

    def order(self, *args: Any, **kwargs: Any) -> Query[_T_Model]:
        f: Callable[..., Query[_T_Model]] = cast(Any, super()).order
        return f(*args, **kwargs)

    def filter(self, *args: Any, **kwargs: Any) -> Query[_T_Model]:
        f: Callable[..., Query[_T_Model]] = cast(Any, super()).filter
        return f(*args, **kwargs)

    def fetch_page(
        self, *args: Any, **kwargs: Any
    ) -> Tuple[Iterable[_T_Model], Optional[ndb.Cursor], bool]:
        f: Callable[..., Tuple[Iterable[_T_Model], Optional[ndb.Cursor], bool]] = (
            cast(Any, super()).fetch_page
        )
        return f(*args, **kwargs)


class Key(Generic[_T_Model], ndb.Key):
    """A type-safer wrapper around ndb.Key"""

    def id(self) -> int:
        return cast(int, cast(Any, super()).id())

    def get(self, *args: Any, **kwargs: Any) -> Optional[_T_Model]:
        return cast(Optional[_T_Model], cast(Any, super()).get(*args, **kwargs))

    def delete(self, *args: Any, **kwargs: Any) -> None:
        cast(Any, super()).delete(*args, **kwargs)


class Model(Generic[_T_Model], ndb.Model):
    """A type-safer wrapper around ndb.Model"""

    @property
    def key(self) -> Key[_T_Model]:  # type: ignore
        return cast(Key[_T_Model], cast(Any, super()).key)

    def put(self, **kwargs: Any) -> Key[_T_Model]:
        return cast(Any, super()).put(**kwargs)

    @classmethod
    def get_by_id(  # type: ignore
        cls: Type[_T_Model], identifier: int, **kwargs: Any
    ) -> Optional[_T_Model]:
        return cast(Any, super()).get_by_id(identifier, **kwargs)

    @classmethod
    def query(cls: Type[_T_Model], *args: Any, **kwargs: Any) -> Query[_T_Model]:
        return cast(Query[_T_Model], cast(Any, super()).query(*args, **kwargs))

    @classmethod
    def make_key(cls: Type[_T_Model], identifier: int) -> Key[_T_Model]:
        return cast(Key[_T_Model], ndb.Key(cls, identifier))

    @staticmethod
    def Str(name: str) -> str:
        """This is indexed by default"""
        return cast(str, ndb.StringProperty(name, required=True))

    @staticmethod
    def OptionalStr(name: str, default: Optional[str] = None) -> Optional[str]:
        """This is indexed by default"""
        return cast(
            Optional[str], ndb.StringProperty(name, required=False, default=default)
        )

    @staticmethod
    def OptionalText(name: str, default: Optional[str] = None) -> Optional[str]:
        """Nonindexed string, optional"""
        return cast(
            Optional[str], ndb.TextProperty(name, required=False, default=default)
        )


class BookModel(Model["BookModel"]):
    """Models a book on the shelf"""

    title = Model.Str(BOOK_PROPERTIES["title"])
    author = Model.Str(BOOK_PROPERTIES["author"])
    # Free-form, as entered by the user
    published_date = Model.OptionalStr(BOOK_PROPERTIES["published_date"])
    # Descriptions may exceed the 1500 byte limit on indexed strings
    description = Model.OptionalText(BOOK_PROPERTIES["description"])
    created_by = Model.OptionalStr(BOOK_PROPERTIES["created_by"])
    created_by_id = Model.OptionalStr(BOOK_PROPERTIES["created_by_id"])
    image_url = Model.OptionalStr(BOOK_PROPERTIES["image_url"])

    @classmethod
    def _get_kind(cls) -> str:
        return BOOK_KIND

    @classmethod
    def prop(cls, name: str) -> Any:
        """Return the property object for a Python attribute name"""
        p = getattr(cls, name, None)
        if not isinstance(p, ndb.Property):
            raise AttributeError(f"BookModel has no property '{name}'")
        return p
