"""Unit tests for listings, search, reviews, categories and wishlists."""

import uuid
from decimal import Decimal

import pytest

from agrilink.core.exceptions import BadRequestException, ForbiddenException, ResourceNotFoundException
from agrilink.core.models.domain.enums import ListingStatus
from agrilink.core.models.io.marketplace import (
    CategoryCreate,
    ListingCreate,
    ListingSearchParams,
    ListingUpdate,
    ReviewCreate,
)
from agrilink.server.services.categories import CategoryService
from agrilink.server.services.listings import ListingService
from agrilink.server.services.reviews import ReviewService
from agrilink.server.services.wishlist import WishlistService


class TestListingService:
    async def test_create_starts_as_draft_with_primary_image(self, session):
        seller_id = uuid.uuid4()

        listing = await ListingService(session).create_listing(
            seller_id,
            ListingCreate(
                title="Basmati Rice",
                quantity=Decimal("500"),
                price_per_unit=Decimal("80"),
                image_urls=["https://img.example/rice-1.jpg", "https://img.example/rice-2.jpg"],
            ),
        )

        assert listing.status == ListingStatus.DRAFT
        assert listing.image_urls == ["https://img.example/rice-1.jpg", "https://img.example/rice-2.jpg"]
        assert listing.primary_image_url == "https://img.example/rice-1.jpg"

    async def test_publish_and_owner_checks(self, session, make_listing):
        seller_id = uuid.uuid4()
        draft = await make_listing(seller_id, status=ListingStatus.DRAFT)
        service = ListingService(session)

        with pytest.raises(ForbiddenException):
            await service.publish_listing(draft.id, uuid.uuid4())

        published = await service.publish_listing(draft.id, seller_id)
        assert published.status == ListingStatus.ACTIVE

    async def test_update_replaces_images(self, session, make_listing):
        seller_id = uuid.uuid4()
        listing = await make_listing(seller_id)

        updated = await ListingService(session).update_listing(
            listing.id, seller_id, ListingUpdate(price_per_unit=Decimal("120"), image_urls=["https://img.example/a.jpg"])
        )

        assert updated.price_per_unit == 120.0
        assert updated.title == "Organic Tomatoes"
        assert updated.image_urls == ["https://img.example/a.jpg"]

    async def test_get_listing_counts_views(self, session, make_listing):
        listing = await make_listing(uuid.uuid4())
        service = ListingService(session)

        await service.get_listing(listing.id)
        read = await service.get_listing(listing.id)

        assert read.view_count == 2

    async def test_delete_is_soft(self, session, make_listing):
        seller_id = uuid.uuid4()
        listing = await make_listing(seller_id)
        service = ListingService(session)

        await service.delete_listing(listing.id, seller_id)

        assert (await service.get_listing_entity(listing.id)).status == ListingStatus.CANCELLED

    async def test_mark_sold_leaves_active_catalogue(self, session, make_listing):
        seller_id = uuid.uuid4()
        listing = await make_listing(seller_id)
        service = ListingService(session)

        with pytest.raises(ForbiddenException):
            await service.mark_sold(listing.id, uuid.uuid4())

        sold = await service.mark_sold(listing.id, seller_id)

        assert sold.status == ListingStatus.SOLD
        assert (await service.get_active_listings(0, 10)).content == []


class TestListingSearch:
    async def test_only_active_listings_match(self, session, make_listing):
        seller_id = uuid.uuid4()
        await make_listing(seller_id, title="Fresh Mangoes", crop_type="Mango")
        await make_listing(seller_id, title="Mango Pulp", crop_type="Mango", status=ListingStatus.DRAFT)

        page = await ListingService(session).search_listings(ListingSearchParams(keyword="mango"), 0, 20)

        assert [listing.title for listing in page.content] == ["Fresh Mangoes"]

    async def test_price_range_and_sorting(self, session, make_listing):
        seller_id = uuid.uuid4()
        for title, price in (("Cheap", "10"), ("Mid", "50"), ("Dear", "90")):
            await make_listing(seller_id, title=title, price=price)

        page = await ListingService(session).search_listings(
            ListingSearchParams(min_price=Decimal("20"), sort_by="price", sort_direction="asc"), 0, 20
        )

        assert [listing.title for listing in page.content] == ["Mid", "Dear"]

    async def test_crop_type_filter(self, session, make_listing):
        seller_id = uuid.uuid4()
        await make_listing(seller_id, title="Wheat", crop_type="Wheat")
        await make_listing(seller_id, title="Rice", crop_type="Rice")

        page = await ListingService(session).search_listings(ListingSearchParams(crop_types=["Rice"]), 0, 20)

        assert page.total_elements == 1
        assert page.content[0].title == "Rice"


class TestReviewService:
    async def test_review_updates_listing_and_seller_rating(self, session, make_listing):
        seller_id = uuid.uuid4()
        listing = await make_listing(seller_id)
        service = ReviewService(session)

        await service.create_review(uuid.uuid4(), ReviewCreate(listing_id=listing.id, rating=5))
        await service.create_review(uuid.uuid4(), ReviewCreate(listing_id=listing.id, rating=4))

        summary = await service.get_rating_summary(listing.id)
        assert summary.average_rating == 4.5
        assert summary.total_reviews == 2
        assert summary.distribution == {1: 0, 2: 0, 3: 0, 4: 1, 5: 1}

        stored = await ListingService(session).get_listing_entity(listing.id)
        assert Decimal(stored.average_rating) == Decimal("4.50")
        assert stored.review_count == 2

        seller = await service.get_seller_rating(seller_id)
        assert seller.total_reviews == 2
        assert seller.average_rating == 4.5

    async def test_cannot_review_own_listing_or_twice(self, session, make_listing):
        seller_id, buyer_id = uuid.uuid4(), uuid.uuid4()
        listing = await make_listing(seller_id)
        service = ReviewService(session)

        with pytest.raises(BadRequestException, match="own listing"):
            await service.create_review(seller_id, ReviewCreate(listing_id=listing.id, rating=5))

        await service.create_review(buyer_id, ReviewCreate(listing_id=listing.id, rating=3))
        with pytest.raises(BadRequestException, match="already reviewed"):
            await service.create_review(buyer_id, ReviewCreate(listing_id=listing.id, rating=4))
        assert await service.can_review(listing.id, buyer_id) is False

    async def test_order_review_is_verified(self, session, make_listing):
        listing = await make_listing(uuid.uuid4())

        review = await ReviewService(session).create_review(
            uuid.uuid4(), ReviewCreate(listing_id=listing.id, order_id=uuid.uuid4(), rating=5)
        )

        assert review.is_verified_purchase is True

    async def test_delete_review_restores_ratings(self, session, make_listing):
        seller_id, buyer_id = uuid.uuid4(), uuid.uuid4()
        listing = await make_listing(seller_id)
        service = ReviewService(session)
        review = await service.create_review(buyer_id, ReviewCreate(listing_id=listing.id, rating=2))

        with pytest.raises(BadRequestException, match="your own reviews"):
            await service.delete_review(review.id, uuid.uuid4())

        await service.delete_review(review.id, buyer_id)

        assert (await service.get_rating_summary(listing.id)).total_reviews == 0
        assert (await service.get_seller_rating(seller_id)).total_reviews == 0

    async def test_mark_helpful(self, session, make_listing):
        listing = await make_listing(uuid.uuid4())
        service = ReviewService(session)
        review = await service.create_review(uuid.uuid4(), ReviewCreate(listing_id=listing.id, rating=5))

        assert (await service.mark_helpful(review.id)).helpful_count == 1


class TestCategoryService:
    async def test_tree_and_product_counts(self, session, make_listing):
        service = CategoryService(session)
        produce = await service.create_category(CategoryCreate(name="Produce"))
        await service.create_category(CategoryCreate(name="Vegetables", parent_id=produce.id))
        listing = await make_listing(uuid.uuid4())
        listing.category_id = produce.id
        await session.commit()

        roots = await service.get_root_categories()
        children = await service.get_subcategories(produce.id)
        everything = {category.name: category for category in await service.get_all_categories()}

        assert [category.name for category in roots] == ["Produce"]
        assert [category.name for category in children] == ["Vegetables"]
        assert everything["Produce"].product_count == 1
        assert everything["Vegetables"].product_count == 0

    async def test_duplicate_name(self, session):
        service = CategoryService(session)
        await service.create_category(CategoryCreate(name="Fruit"))

        with pytest.raises(BadRequestException, match="already exists"):
            await service.create_category(CategoryCreate(name="Fruit"))

    async def test_unknown_parent(self, session):
        with pytest.raises(ResourceNotFoundException):
            await CategoryService(session).create_category(CategoryCreate(name="Orphan", parent_id=uuid.uuid4()))


class TestWishlistService:
    async def test_add_is_idempotent_and_remove(self, session, make_listing):
        listing = await make_listing(uuid.uuid4())
        user_id = uuid.uuid4()
        service = WishlistService(session)

        first = await service.add_to_wishlist(user_id, listing.id)
        second = await service.add_to_wishlist(user_id, listing.id)

        assert first.id == second.id
        assert await service.get_wishlist_count(user_id) == 1
        wishlist = await service.get_wishlist(user_id)
        assert wishlist[0].listing.title == "Organic Tomatoes"

        await service.remove_from_wishlist(user_id, listing.id)
        assert await service.is_in_wishlist(user_id, listing.id) is False

    async def test_remove_missing(self, session):
        with pytest.raises(ResourceNotFoundException):
            await WishlistService(session).remove_from_wishlist(uuid.uuid4(), uuid.uuid4())
