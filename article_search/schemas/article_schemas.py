from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class CommentInfo(BaseModel):
    """Nested comment summary stored on each article"""
    model_config = ConfigDict(populate_by_name=True)

    comment_count: Optional[int] = Field(None, alias="commentCount")
    last_comment: Optional[str] = Field(None, alias="lastComment")


class Article(BaseModel):
    """Article view projected from a stored search document"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    view_count: Optional[int] = Field(None, alias="viewCount")
    create_time: Optional[int] = Field(None, alias="createTime", description="Epoch milliseconds")
    comment_info: Optional[CommentInfo] = Field(None, alias="commentInfo")

    @classmethod
    def from_source(cls, source: Dict[str, Any], doc_id: Optional[str] = None,
                    overrides: Optional[Dict[str, Any]] = None) -> "Article":
        """
        Build an article from a hit's _source.

        Args:
            source: The stored document
            doc_id: Engine _id, used when the document carries no id of its own
            overrides: Field values (by stored name) replacing the stored ones

        Returns:
            Article: The projected record
        """
        data = dict(source or {})
        if data.get("id") is None and doc_id is not None:
            data["id"] = doc_id
        if overrides:
            data.update(overrides)
        return cls.model_validate(data)

    def to_document(self) -> Dict[str, Any]:
        """Serialize using the stored field names"""
        return self.model_dump(by_alias=True, exclude_none=True)

