"""Schemas for plants and articles read from the content store, and the projections the tools return."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BilingualText(BaseModel):
    """Text in the primary (English) and secondary (Spanish) language. Accepts {"en", "es"} or {"primary", "secondary"}."""

    primary: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("en", "primary"),
        description="Primary-language value (always present).",
    )
    secondary: str = Field(
        "",
        validation_alias=AliasChoices("es", "secondary"),
        description="Secondary-language value; may be empty.",
    )


class Plant(BaseModel):
    """Plant record as stored. Only a projection of it is ever shown to the model."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: BilingualText
    scientific_name: str | None = Field(None, alias="scientificName")
    family: BilingualText | None = None
    description: BilingualText
    properties: BilingualText | None = None
    uses: BilingualText | None = None
    cultural_significance: BilingualText | None = Field(None, alias="culturalSignificance")
    preparation_methods: BilingualText | None = Field(None, alias="preparationMethods")
    dosage: BilingualText | None = None
    precautions: BilingualText | None = None
    ethical_harvesting: BilingualText | None = Field(None, alias="ethicalHarvesting")
    tags: list[str] = Field(default_factory=list)
    related_blogs: list[str] = Field(default_factory=list, alias="relatedBlogs")
    is_locked: bool = Field(False, alias="isLocked")
    created_at: str | None = Field(None, alias="createdAt")


class Article(BaseModel):
    """Article (blog) record as stored. Content may contain HTML from the rich-text editor."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    title: BilingualText
    content: BilingualText
    tags: list[str] = Field(default_factory=list)
    related_plants: list[str] = Field(default_factory=list, alias="relatedPlants")
    is_locked: bool = Field(False, alias="isLocked")
    created_at: str | None = Field(None, alias="createdAt")


class PlantSummary(BaseModel):
    """listPlants item: id plus primary-language name."""

    id: str
    name: str


class PlantDetail(BaseModel):
    """getPlantDetails output."""

    id: str
    name: BilingualText
    scientific_name: str | None = Field(None, serialization_alias="scientificName")
    description: BilingualText

    def to_tool_output(self) -> dict:
        """Shape returned by getPlantDetails: camelCase keys, no nulls."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_plant(cls, plant: Plant) -> "PlantDetail":
        return cls(
            id=plant.id,
            name=plant.name,
            scientific_name=plant.scientific_name,
            description=plant.description,
        )


class ArticleSummary(BaseModel):
    """listArticles item: id plus primary-language title."""

    id: str
    title: str


class ArticleDetail(BaseModel):
    """getArticleDetails output."""

    id: str
    title: BilingualText
    content: BilingualText

    @classmethod
    def from_article(cls, article: Article) -> "ArticleDetail":
        return cls(id=article.id, title=article.title, content=article.content)
