from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class MemoryCategory(str, Enum):
    PREFERENCE = "preference"
    DISLIKE = "dislike"
    FAVORITE = "favorite"
    ALLERGY = "allergy"
    FAMILY_INFO = "family_info"
    SCHEDULE = "schedule"
    BUDGET = "budget"
    COOKING_TIP = "cooking_tip"


CATEGORY_VALUES = frozenset(c.value for c in MemoryCategory)


class MessageTurn(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str = Field(..., description="Message role: 'user' or 'assistant'")
    content: Union[str, List[Dict[str, Any]]] = Field(..., description="Text or typed content blocks")


class ChatRequest(BaseModel):
    model: Optional[str] = Field(None, description="Upstream model identifier")
    max_tokens: Optional[int] = Field(None, description="Completion token budget")
    system: Optional[str] = Field(None, description="System prompt")
    messages: List[MessageTurn] = Field(default_factory=list, description="Conversation turns")


class ChatExchange(BaseModel):
    user_content: Union[str, List[Dict[str, Any]]] = Field(..., description="Content of the last user turn")
    assistant_reply: str = Field(..., description="Text of the assistant reply")


class ValidatedMemory(BaseModel):
    user_id: str = Field(..., description="Owner identity")
    fact: str = Field(..., description="Memory text")
    category: MemoryCategory = Field(..., description="Memory category")

    def to_row(self) -> Dict[str, str]:
        return {"user_id": self.user_id, "fact": self.fact, "category": self.category.value}


class Memory(BaseModel):
    id: Union[int, str] = Field(..., description="Store-assigned memory ID")
    fact: str = Field(..., description="Memory text")
    category: str = Field(..., description="Memory category")
    created_at: Optional[str] = Field(None, description="ISO timestamp")


class Profile(BaseModel):
    family_size: Optional[str] = Field(None, description="Household size")
    kids_ages: Optional[str] = Field(None, description="Children's ages")
    dietary_needs: Optional[str] = Field(None, description="Dietary needs")
    dislikes: Optional[str] = Field(None, description="Disliked foods")
    budget: Optional[str] = Field(None, description="Grocery budget")
    cooking_skill: Optional[str] = Field(None, description="Cooking skill level")
    busy_nights: Optional[str] = Field(None, description="Busy weeknights")
    favorites: Optional[str] = Field(None, description="Favorite meals")
    equipment: Optional[str] = Field(None, description="Kitchen equipment")


class ProfileResponse(BaseModel):
    profile: Optional[Profile] = Field(None, description="Stored profile, if any")


class MemoriesResponse(BaseModel):
    memories: List[Memory] = Field(..., description="Memory records, newest first")
