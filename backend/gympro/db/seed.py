"""
Reference data seeding

Every seeder inserts the rows whose unique key is missing and leaves existing
rows untouched, so running it any number of times is safe.
"""

from decimal import Decimal
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gympro.core.logging_config import get_logger
from gympro.models.achievement import Achievement
from gympro.models.product import Product, ProductCategory
from gympro.models.workout import WorkoutCategory, WorkoutVideo

logger = get_logger(__name__)


DEFAULT_ACHIEVEMENTS = [
    ("First Workout", "Complete your first workout", "workouts_completed", 1),
    ("Getting Started", "Complete 5 workouts", "workouts_completed", 5),
    ("Dedicated", "Complete 25 workouts", "workouts_completed", 25),
    ("Unstoppable", "Complete 100 workouts", "workouts_completed", 100),
    ("Calorie Crusher", "Burn 1,000 calories total", "calories_burned", 1000),
    ("Inferno", "Burn 10,000 calories total", "calories_burned", 10000),
    ("3-Day Streak", "Work out 3 days in a row", "streak", 3),
    ("Week Warrior", "Work out 7 days in a row", "streak", 7),
    ("Monthly Master", "Work out 30 days in a row", "streak", 30),
    ("Community Star", "Create 10 community posts", "posts_created", 10),
    ("Social Butterfly", "Receive 50 likes on your posts", "likes_received", 50),
    ("Custom Creator", "Create 5 custom workouts", "custom_workouts_created", 5),
]

PRODUCT_CATEGORIES = [
    {"name": "Supplements", "slug": "supplements", "description": "Premium fitness supplements for peak performance"},
    {"name": "Equipment", "slug": "equipment", "description": "High-quality gym equipment for home and studio"},
    {"name": "Apparel", "slug": "apparel", "description": "Stylish and comfortable workout clothing"},
    {"name": "Accessories", "slug": "accessories", "description": "Essential fitness accessories and gear"},
]

_IMG = "https://images.unsplash.com/photo-{}?w=400&h=400&fit=crop"

# (category slug, name, slug, price, compare price, featured, stock, image id, description)
PRODUCTS = [
    ("supplements", "Whey Protein Isolate", "whey-protein-isolate", "49.99", "64.99", True, 150,
     "1593095948071-474c5cc2c104",
     "Premium whey protein isolate with 25g protein per serving. Fast-absorbing formula for post-workout recovery."),
    ("supplements", "Pre-Workout Energy Blend", "pre-workout-energy-blend", "34.99", "44.99", True, 200,
     "1546483875-ad9014c88eba",
     "Energy and focus formula with caffeine, beta-alanine and L-citrulline. Take 30 minutes before training."),
    ("supplements", "BCAA Recovery Complex", "bcaa-recovery-complex", "29.99", None, False, 120,
     "1579722821273-0f6c7d44362f",
     "Branch chain amino acids in a 2:1:1 ratio to support muscle recovery and reduce soreness."),
    ("supplements", "Creatine Monohydrate", "creatine-monohydrate", "24.99", None, False, 300,
     "1619088755808-5c5d80012e21",
     "Pure creatine monohydrate powder, 5g per serving. Unflavored and mixes easily."),
    ("equipment", "Adjustable Dumbbell Set", "adjustable-dumbbell-set", "299.99", "399.99", True, 30,
     "1638536532686-d610adfc8e5c",
     "Space-saving adjustable dumbbells from 5 to 52.5 lbs with a quick-change weight system."),
    ("equipment", "Resistance Band Set (5 Pack)", "resistance-band-set", "39.99", "54.99", False, 80,
     "1598289431512-b97b0917affc",
     "Five resistance bands from 10 to 50 lbs. Includes door anchor, handles and ankle straps."),
    ("equipment", "Premium Yoga Mat", "premium-yoga-mat", "44.99", None, False, 60,
     "1601925260368-ae2f83cf8b7f",
     "Extra-thick 6mm non-slip yoga mat with alignment lines. Includes carrying strap."),
    ("equipment", "Pull-Up Bar (Doorway)", "pull-up-bar-doorway", "34.99", None, False, 45,
     "1598971639058-fab3c3109a00",
     "Heavy-duty doorway pull-up bar with multiple grip positions. No drilling required."),
    ("apparel", "Performance Training Tee", "performance-training-tee", "29.99", "39.99", True, 200,
     "1521572163474-6864f9cf17ab",
     "Moisture-wicking training t-shirt with 4-way stretch fabric."),
    ("apparel", "Compression Leggings", "compression-leggings", "54.99", None, False, 100,
     "1506629082955-511b1aa562c8",
     "High-waist compression leggings with squat-proof fabric and a hidden pocket."),
    ("apparel", "Workout Shorts", "workout-shorts", "34.99", None, False, 150,
     "1562886877-aaaa5c17965a",
     "Lightweight training shorts with built-in liner and zipper pockets."),
    ("accessories", "Gym Gloves (Pair)", "gym-gloves", "19.99", None, False, 250,
     "1583473848882-f9a5bc7fd2ee",
     "Padded weightlifting gloves with wrist support and a reinforced palm."),
    ("accessories", "Insulated Shaker Bottle", "insulated-shaker-bottle", "14.99", "19.99", True, 400,
     "1594498653385-d5172c532c00",
     "Double-wall insulated 24oz shaker bottle with blender ball. Leak-proof."),
    ("accessories", "Lifting Belt", "lifting-belt", "59.99", "79.99", False, 70,
     "1517344884509-a0c97ec11bcc",
     "Leather lifting belt with double-prong buckle and 4-inch width for core support."),
]

_VIDEO = "https://videos.gymproluxe.com/{}.mp4"

# Demo catalog for local development; seeded by scripts/seed_workouts.py only
WORKOUT_CATALOG = [
    {
        "name": "Strength",
        "slug": "strength",
        "description": "Build muscle and increase power with targeted strength training routines.",
        "videos": [
            ("Full Body Strength for Beginners", "strength/full-body-beginners", 1800, "BEGINNER", [], 200, False),
            ("Upper Body Dumbbell Blast", "strength/upper-body-dumbbell", 2400, "INTERMEDIATE",
             ["Dumbbells", "Bench"], 320, False),
            ("Barbell Power Complex", "strength/barbell-power", 3000, "ADVANCED",
             ["Barbell", "Weight Plates", "Squat Rack"], 450, True),
        ],
    },
    {
        "name": "Cardio",
        "slug": "cardio",
        "description": "Boost your endurance and burn calories with high-energy cardio workouts.",
        "videos": [
            ("Low Impact Cardio Walk", "cardio/low-impact-walk", 1500, "BEGINNER", [], 150, False),
            ("Treadmill Interval Training", "cardio/treadmill-intervals", 1800, "INTERMEDIATE",
             ["Treadmill"], 350, False),
        ],
    },
    {
        "name": "Yoga",
        "slug": "yoga",
        "description": "Improve flexibility, balance and mindfulness through guided yoga sessions.",
        "videos": [
            ("Morning Yoga Flow", "yoga/morning-flow", 1200, "BEGINNER", ["Yoga Mat"], 100, False),
            ("Vinyasa Power Flow", "yoga/vinyasa-power", 2700, "INTERMEDIATE",
             ["Yoga Mat", "Yoga Blocks"], 250, False),
        ],
    },
    {
        "name": "HIIT",
        "slug": "hiit",
        "description": "High Intensity Interval Training to torch calories and build explosive fitness.",
        "videos": [
            ("15-Minute HIIT Starter", "hiit/starter-15", 900, "BEGINNER", [], 180, False),
            ("Elite HIIT Circuit", "hiit/elite-circuit", 2400, "ADVANCED", ["Kettlebell", "Box"], 550, True),
        ],
    },
    {
        "name": "Pilates",
        "slug": "pilates",
        "description": "Strengthen your core and improve posture with controlled Pilates movements.",
        "videos": [
            ("Pilates Core Foundations", "pilates/core-foundations", 1500, "BEGINNER", ["Mat"], 120, False),
        ],
    },
]


async def seed_achievements(db: AsyncSession) -> int:
    """Returns the number of achievements created"""
    existing = set((await db.execute(select(Achievement.name))).scalars().all())
    created = 0
    for name, description, criteria_type, threshold in DEFAULT_ACHIEVEMENTS:
        if name in existing:
            continue
        db.add(Achievement(
            name=name,
            description=description,
            criteria={"type": criteria_type, "threshold": threshold},
        ))
        created += 1
        logger.info(f"  Created achievement: {name}")

    await db.commit()
    return created


async def seed_products(db: AsyncSession) -> int:
    """Categories keyed by slug, products keyed by slug; returns products created"""
    categories: Dict[str, ProductCategory] = {
        c.slug: c for c in (await db.execute(select(ProductCategory))).scalars().all()
    }
    for index, data in enumerate(PRODUCT_CATEGORIES):
        if data["slug"] in categories:
            continue
        category = ProductCategory(sort_order=index, **data)
        db.add(category)
        categories[data["slug"]] = category
        logger.info(f"  Created product category: {data['name']}")
    await db.flush()

    existing = set((await db.execute(select(Product.slug))).scalars().all())
    created = 0
    for category_slug, name, slug, price, compare_price, featured, stock, image, description in PRODUCTS:
        if slug in existing:
            continue
        db.add(Product(
            name=name,
            slug=slug,
            description=description,
            price=Decimal(price),
            compare_price=Decimal(compare_price) if compare_price else None,
            image_url=_IMG.format(image),
            category_id=categories[category_slug].id,
            is_featured=featured,
            is_active=True,
            stock=stock,
        ))
        created += 1
        logger.info(f"  Created product: {name}")

    await db.commit()
    return created


async def seed_workout_catalog(db: AsyncSession) -> int:
    """Categories keyed by slug; videos are only added with a new category"""
    existing = set((await db.execute(select(WorkoutCategory.slug))).scalars().all())
    created = 0
    for index, data in enumerate(WORKOUT_CATALOG):
        if data["slug"] in existing:
            continue
        category = WorkoutCategory(
            name=data["name"],
            slug=data["slug"],
            description=data["description"],
            sort_order=index,
        )
        category.videos = [
            WorkoutVideo(
                title=title,
                description=title,
                video_url=_VIDEO.format(path),
                duration=duration,
                difficulty=difficulty,
                equipment_needed=equipment,
                calories_burned=calories,
                is_premium=premium,
                is_published=True,
            )
            for title, path, duration, difficulty, equipment, calories, premium in data["videos"]
        ]
        db.add(category)
        created += 1
        logger.info(f"  Created workout category {data['name']} with {len(data['videos'])} videos")

    await db.commit()
    return created


async def seed_reference_data(db: AsyncSession) -> None:
    """Startup seeding; each seeder fails on its own without stopping the others"""
    for seeder in (seed_achievements, seed_products):
        try:
            created = await seeder(db)
            logger.info(f"🌱 {seeder.__name__}: {created} created")
        except Exception as e:
            await db.rollback()
            logger.error(f"❌ {seeder.__name__} failed: {e}", exc_info=True)
