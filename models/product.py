"""Product and page data models for the hotline.ua scraper."""

from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Tuple


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class Product:
    """Snapshot of one catalog entry as returned by the catalog API.

    Args:
        product_id: Numeric hotline.ua product id (``_id``)
        title: Product title
        vendor_title: Vendor (manufacturer) name
        section_id: Id of the catalog section the product belongs to
        category_name: Human readable category name of the section
        min_price: Lowest offer price observed
        max_price: Highest offer price observed
        offer_count: Number of shop offers
        url: Canonical product URL (site relative)
        image_links: Image URLs
        tech_short_specifications_list: Short specification strings
        single_offer: Offer summary when only one shop sells the product
    """

    product_id: int
    title: str
    date: Optional[str] = None
    vendor_title: Optional[str] = None
    section_id: Optional[int] = None
    category_name: Optional[str] = None
    is_promo: Optional[bool] = None
    to_official: Optional[bool] = None
    promo_bid: Optional[Any] = None
    line_name: Optional[str] = None
    line_path: Optional[str] = None
    images_count: Optional[int] = None
    videos_count: Optional[int] = None
    tech_short_specifications: Optional[Any] = None
    tech_short_specifications_list: Tuple[str, ...] = ()
    reviews_count: Optional[int] = None
    questions_count: Optional[int] = None
    url: Optional[str] = None
    image_links: Tuple[str, ...] = ()
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sales_count: Optional[int] = None
    is_new: Optional[Any] = None
    colors_product: Optional[Any] = None
    offer_count: Optional[int] = None
    single_offer: Optional[Dict[str, Any]] = None
    made_in_ukraine: Optional[bool] = None
    user_subscribed: Optional[bool] = None

    @classmethod
    def from_graphql(cls, item: Dict[str, Any]) -> "Product":
        """Build a Product from one item of the ``collection`` list.

        Args:
            item: Decoded GraphQL product object

        Returns:
            Product instance

        Raises:
            ValueError: If the item has no ``_id``
        """
        if item.get("_id") is None:
            raise ValueError(f"Product item without _id: {item!r}")

        vendor = item.get("vendor") or {}
        section = item.get("section") or {}

        return cls(
            product_id=int(item["_id"]),
            title=item.get("title") or "",
            date=item.get("date"),
            vendor_title=vendor.get("title"),
            section_id=_optional_int(section.get("_id")),
            category_name=section.get("productCategoryName"),
            is_promo=item.get("isPromo"),
            to_official=item.get("toOfficial"),
            promo_bid=item.get("promoBid"),
            line_name=item.get("lineName"),
            line_path=item.get("linePathNew"),
            images_count=item.get("imagesCount"),
            videos_count=item.get("videosCount"),
            tech_short_specifications=item.get("techShortSpecifications"),
            tech_short_specifications_list=tuple(
                item.get("techShortSpecificationsList") or ()
            ),
            reviews_count=item.get("reviewsCount"),
            questions_count=item.get("questionsCount"),
            url=item.get("url"),
            image_links=tuple(item.get("imageLinks") or ()),
            min_price=item.get("minPrice"),
            max_price=item.get("maxPrice"),
            sales_count=item.get("salesCount"),
            is_new=item.get("isNew"),
            colors_product=item.get("colorsProduct"),
            offer_count=item.get("offerCount"),
            single_offer=item.get("singleOffer"),
            made_in_ukraine=item.get("madeInUkraine"),
            user_subscribed=item.get("userSubscribed"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Product to the catalog API's dictionary shape.

        Returns:
            Dictionary representation of the Product
        """
        return {
            "_id": self.product_id,
            "title": self.title,
            "date": self.date,
            "vendor": {"title": self.vendor_title} if self.vendor_title else None,
            "section": {
                "_id": self.section_id,
                "productCategoryName": self.category_name,
            },
            "isPromo": self.is_promo,
            "toOfficial": self.to_official,
            "promoBid": self.promo_bid,
            "lineName": self.line_name,
            "linePathNew": self.line_path,
            "imagesCount": self.images_count,
            "videosCount": self.videos_count,
            "techShortSpecifications": self.tech_short_specifications,
            "techShortSpecificationsList": list(self.tech_short_specifications_list),
            "reviewsCount": self.reviews_count,
            "questionsCount": self.questions_count,
            "url": self.url,
            "imageLinks": list(self.image_links),
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "salesCount": self.sales_count,
            "isNew": self.is_new,
            "colorsProduct": self.colors_product,
            "offerCount": self.offer_count,
            "singleOffer": self.single_offer,
            "madeInUkraine": self.made_in_ukraine,
            "userSubscribed": self.user_subscribed,
        }


@dataclass(frozen=True)
class PaginationInfo:
    """Pagination metadata reported alongside a page of products."""

    last_page: Optional[int] = None
    total_count: Optional[int] = None
    items_per_page: Optional[int] = None

    @classmethod
    def from_graphql(cls, data: Optional[Dict[str, Any]]) -> "PaginationInfo":
        data = data or {}
        return cls(
            last_page=_optional_int(data.get("lastPage")),
            total_count=_optional_int(data.get("totalCount")),
            items_per_page=_optional_int(data.get("itemsPerPage")),
        )


@dataclass(frozen=True)
class PageRequest:
    """Parameters of one catalog page fetch.

    Args:
        path: Category path, e.g. ``mobilnye-telefony-i-smartfony``
        page: 1-based page number
        items_per_page: Number of products per page
        city_id: City used for offer pricing
        sort: Sort mode understood by the API
        filters: Filter value ids to apply
        excluded_filters: Filter value ids to exclude
        price_min: Lower price bound
        price_max: Upper price bound
    """

    path: str
    page: int = 1
    items_per_page: int = 48
    city_id: int = 5394
    sort: str = "popularity"
    filters: Tuple[int, ...] = ()
    excluded_filters: Tuple[int, ...] = ()
    price_min: Optional[int] = None
    price_max: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Category path must not be empty")
        if self.page < 1:
            raise ValueError(f"Page number must be >= 1, got {self.page}")
        if self.items_per_page <= 0:
            raise ValueError(
                f"Items per page must be positive, got {self.items_per_page}"
            )

    def to_variables(self) -> Dict[str, Any]:
        """Render the GraphQL variables object for this request."""
        variables: Dict[str, Any] = {
            "path": self.path,
            "cityId": self.city_id,
            "page": self.page,
            "sort": self.sort,
            "itemsPerPage": self.items_per_page,
            "filters": list(self.filters),
            "excludedFilters": list(self.excluded_filters),
        }
        if self.price_min is not None:
            variables["priceMin"] = self.price_min
        if self.price_max is not None:
            variables["priceMax"] = self.price_max
        return variables


@dataclass(frozen=True)
class PageResult:
    """Decoded products and pagination metadata of one successful page."""

    page: int
    products: Tuple[Product, ...]
    pagination: PaginationInfo

    @classmethod
    def from_graphql(cls, page: int, result: Dict[str, Any]) -> "PageResult":
        """Build a PageResult from the ``byPathSectionQueryProducts`` object."""
        collection: List[Dict[str, Any]] = result.get("collection") or []
        return cls(
            page=page,
            products=tuple(Product.from_graphql(item) for item in collection),
            pagination=PaginationInfo.from_graphql(result.get("paginationInfo")),
        )
