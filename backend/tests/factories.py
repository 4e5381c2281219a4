from sqlalchemy import select

from backend.carconnect.models import Brand, BrandAdmin, CarModel, Lead, Trim, User


def brand_by_slug(db, slug: str) -> Brand:
    return db.execute(select(Brand).where(Brand.slug == slug)).scalar_one()


def model_by_slug(db, slug: str) -> CarModel:
    return db.execute(select(CarModel).where(CarModel.slug == slug)).scalar_one()


def trim_by_slug(db, slug: str) -> Trim:
    return db.execute(select(Trim).where(Trim.slug == slug)).scalar_one()


def make_user(db, provider_id: str, email: str, role: str = "user", full_name: str = "Test User") -> User:
    user = User(provider_id=provider_id, email=email, full_name=full_name, role=role)
    db.add(user)
    db.commit()
    return user


def make_brand_admin(db, user: User, brand: Brand) -> BrandAdmin:
    row = BrandAdmin(brand_id=brand.id, user_id=user.id)
    db.add(row)
    user.role = "brand_admin"
    db.commit()
    return row


def make_lead(db, trim: Trim, name: str = "Cliente", status: str = "new") -> Lead:
    lead = Lead(
        car_id=trim.id,
        name=name,
        email="cliente@test.uy",
        phone="099123456",
        department="Montevideo",
        status=status,
    )
    db.add(lead)
    db.commit()
    return lead
