"""
Request bodies for the JSON API.

Fields default to empty strings so that missing values reach the domain
rules and come back as 400 messages instead of pydantic 422 errors.
Values of the wrong type get a 400 {"error": ...} from the handler in
blog.app.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CategoryIn(BaseModel):
    name: Optional[str] = Field("", description="Category name, 2-50 characters")


class TopicIn(BaseModel):
    title: Optional[str] = Field("", description="Topic title, 3-200 characters")
    content: Optional[str] = Field("", description="Rich HTML content")
    category: Optional[str] = Field("", description="Name of an existing category")
