"""SQLAlchemy models for the storefront catalog.

Defines the tables the export reads from: sales channels and their
domains, categories, products with prices, visibilities, media and
properties, SEO URLs and customer groups.
Every model maps itself to an immutable domain entity.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    inspect,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from searchfeed.domain.entities import (
    Category,
    CustomerGroup,
    Product,
    ProductAttribute,
    ProductMedia,
    ProductPrice,
    SalesChannel,
    SalesChannelDomain,
    SeoUrl,
)
from searchfeed.infrastructure.database import Base


def generate_id() -> str:
    """Generate a 32 character hex identifier."""
    return uuid4().hex


def _loaded(model: Base, attribute: str) -> bool:
    """Check whether a relationship was eagerly loaded.

    Unloaded relationships are never touched, since lazy loading is not
    available on async sessions.
    """
    return attribute not in inspect(model).unloaded


# ============================================================================
# Sales Channels
# ============================================================================


class SalesChannelModel(Base):
    """Sales channel table.

    Attributes:
        id: Channel ID.
        name: Display name.
        language_id: Default language.
        navigation_category_id: Root category of the channel's navigation.
    """

    __tablename__ = "sales_channels"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    language_id: Mapped[str] = mapped_column(String(32), nullable=False)
    navigation_category_id: Mapped[str | None] = mapped_column(String(32), nullable=True)

    domains: Mapped[list["SalesChannelDomainModel"]] = relationship(
        "SalesChannelDomainModel",
        cascade="all, delete-orphan",
        order_by="[SalesChannelDomainModel.position, SalesChannelDomainModel.id]",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<SalesChannel(id={self.id}, name={self.name})>"

    def to_entity(self) -> SalesChannel:
        """Convert to domain entity.

        Returns:
            SalesChannel snapshot.
        """
        domains = (
            tuple(domain.to_entity() for domain in self.domains)
            if _loaded(self, "domains")
            else ()
        )
        return SalesChannel(
            id=self.id,
            name=self.name,
            language_id=self.language_id,
            navigation_category_id=self.navigation_category_id,
            domains=domains,
        )


class SalesChannelDomainModel(Base):
    """Sales channel domain table."""

    __tablename__ = "sales_channel_domains"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    sales_channel_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("sales_channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    language_id: Mapped[str] = mapped_column(String(32), nullable=False)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def to_entity(self) -> SalesChannelDomain:
        return SalesChannelDomain(id=self.id, url=self.url, language_id=self.language_id)


# ============================================================================
# SEO URLs and Categories
# ============================================================================


class SeoUrlModel(Base):
    """SEO URL table.

    A row belongs to either a product or a category.

    Attributes:
        product_id: Owning product.
        category_id: Owning category.
        language_id: Language of the path.
        sales_channel_id: Channel of the path.
        seo_path_info: Path without domain.
        is_canonical: Preferred path flag.
        is_deleted: Soft-delete flag.
        position: Collection order within the owner.
    """

    __tablename__ = "seo_urls"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    product_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    category_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    language_id: Mapped[str] = mapped_column(String(32), nullable=False)
    sales_channel_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    seo_path_info: Mapped[str] = mapped_column(String(1000), nullable=False)
    is_canonical: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def to_entity(self) -> SeoUrl:
        return SeoUrl(
            id=self.id,
            language_id=self.language_id,
            sales_channel_id=self.sales_channel_id,
            seo_path_info=self.seo_path_info,
            is_canonical=self.is_canonical,
            is_deleted=self.is_deleted,
        )


class CategoryModel(Base):
    """Category table.

    The parent reference carries no foreign key constraint, so parent
    chains may be broken or cyclic.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    parent_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    seo_urls: Mapped[list["SeoUrlModel"]] = relationship(
        "SeoUrlModel",
        cascade="all, delete-orphan",
        order_by="[SeoUrlModel.position, SeoUrlModel.id]",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, name={self.name})>"

    def to_entity(self) -> Category:
        """Convert to domain entity.

        Returns:
            Category snapshot.
        """
        seo_urls = (
            tuple(seo_url.to_entity() for seo_url in self.seo_urls)
            if _loaded(self, "seo_urls")
            else ()
        )
        return Category(
            id=self.id,
            name=self.name,
            parent_id=self.parent_id,
            seo_urls=seo_urls,
        )


# ============================================================================
# Customer Groups
# ============================================================================


class CustomerGroupModel(Base):
    """Customer group table."""

    __tablename__ = "customer_groups"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_gross: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def to_entity(self) -> CustomerGroup:
        return CustomerGroup(id=self.id, name=self.name, display_gross=self.display_gross)


# ============================================================================
# Products
# ============================================================================


product_categories = Table(
    "product_categories",
    Base.metadata,
    Column(
        "product_id",
        String(32),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        String(32),
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class ProductModel(Base):
    """Product table.

    Attributes:
        id: Product ID.
        parent_id: Parent product for variants.
        product_number: SKU.
        ean: European article number.
        manufacturer_number: Manufacturer's part number.
        manufacturer: Manufacturer name.
        name: Product name.
        description: Long description.
        active: Whether the product is active.
        created_at: Creation timestamp, also the export order.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    parent_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    product_number: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    ean: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    manufacturer_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    manufacturer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    categories: Mapped[list["CategoryModel"]] = relationship(
        "CategoryModel",
        secondary=product_categories,
        order_by="CategoryModel.id",
    )
    seo_urls: Mapped[list["SeoUrlModel"]] = relationship(
        "SeoUrlModel",
        cascade="all, delete-orphan",
        order_by="[SeoUrlModel.position, SeoUrlModel.id]",
    )
    prices: Mapped[list["ProductPriceModel"]] = relationship(
        "ProductPriceModel",
        cascade="all, delete-orphan",
        order_by="ProductPriceModel.id",
    )
    visibilities: Mapped[list["ProductVisibilityModel"]] = relationship(
        "ProductVisibilityModel",
        cascade="all, delete-orphan",
    )
    media: Mapped[list["ProductMediaModel"]] = relationship(
        "ProductMediaModel",
        cascade="all, delete-orphan",
        order_by="[ProductMediaModel.position, ProductMediaModel.id]",
    )
    properties: Mapped[list["ProductPropertyModel"]] = relationship(
        "ProductPropertyModel",
        cascade="all, delete-orphan",
        order_by="[ProductPropertyModel.position, ProductPropertyModel.id]",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, product_number={self.product_number})>"

    def to_entity(self) -> Product:
        """Convert to domain entity.

        Associations that were not loaded map to empty collections.

        Returns:
            Product snapshot.
        """
        return Product(
            id=self.id,
            product_number=self.product_number,
            name=self.name,
            description=self.description,
            ean=self.ean,
            manufacturer_number=self.manufacturer_number,
            manufacturer=self.manufacturer,
            parent_id=self.parent_id,
            active=self.active,
            categories=(
                tuple(category.to_entity() for category in self.categories)
                if _loaded(self, "categories")
                else ()
            ),
            seo_urls=(
                tuple(seo_url.to_entity() for seo_url in self.seo_urls)
                if _loaded(self, "seo_urls")
                else ()
            ),
            prices=(
                tuple(price.to_entity() for price in self.prices)
                if _loaded(self, "prices")
                else ()
            ),
            attributes=self._attributes() if _loaded(self, "properties") else (),
            media=(
                tuple(media.to_entity() for media in self.media)
                if _loaded(self, "media")
                else ()
            ),
            created_at=self.created_at,
        )

    def _attributes(self) -> tuple[ProductAttribute, ...]:
        """Group property options by property group, keeping order."""
        grouped: dict[str, list[str]] = {}
        for prop in self.properties:
            grouped.setdefault(prop.group_name, []).append(prop.option_name)
        return tuple(
            ProductAttribute(name=name, values=tuple(values))
            for name, values in grouped.items()
        )


class ProductPriceModel(Base):
    """Product price table.

    A row without customer group is the product's default price.
    """

    __tablename__ = "product_prices"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    product_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_group_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    gross: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")

    def to_entity(self) -> ProductPrice:
        return ProductPrice(
            gross=Decimal(self.gross),
            net=Decimal(self.net),
            customer_group_id=self.customer_group_id,
            currency=self.currency,
        )


class ProductVisibilityModel(Base):
    """Product visibility per sales channel (10 link, 20 search, 30 all)."""

    __tablename__ = "product_visibilities"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    product_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sales_channel_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    visibility: Mapped[int] = mapped_column(Integer, nullable=False)


class ProductMediaModel(Base):
    """Product image table."""

    __tablename__ = "product_media"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    product_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def to_entity(self) -> ProductMedia:
        return ProductMedia(url=self.url, position=self.position)


class ProductPropertyModel(Base):
    """Product property option table (e.g. group "Color", option "Red")."""

    __tablename__ = "product_properties"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    product_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    group_name: Mapped[str] = mapped_column(String(255), nullable=False)
    option_name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


