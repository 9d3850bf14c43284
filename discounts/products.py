"""
Modèle de produit en promotion et jeu de données de démonstration.

Les produits ne sont pas persistés en base : une liste complète est
reconstruite à chaque rafraîchissement puis stockée dans le cache Django.
"""
from dataclasses import asdict, dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Product:
    """
    Produit en promotion tel qu'affiché sur une carte.

    Attributes:
        name: Nom du produit
        discount: Remise formatée (texte, ex: "-2,50 €")
        valid_until: Date de fin de validité (texte brut du tableur)
        ean_code: Code EAN, 13 chiffres attendus
        image: URL de l'image (optionnelle)
    """
    name: str
    discount: str
    valid_until: str
    ean_code: str
    image: str = ''

    @property
    def is_complete(self) -> bool:
        """Un produit n'est affiché que si nom, remise et EAN sont renseignés."""
        return bool(self.name and self.discount and self.ean_code)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'Product':
        return cls(
            name=data.get('name', ''),
            discount=data.get('discount', ''),
            valid_until=data.get('valid_until', ''),
            ean_code=data.get('ean_code', ''),
            image=data.get('image', ''),
        )


DEMO_PRODUCTS: Tuple[Product, ...] = (
    Product(
        name="Nutella 750g Glas",
        discount="-2,50 €",
        valid_until="2024-02-15",
        ean_code="8000500037508",
        image="https://images.unsplash.com/photo-1558961363-fa8fdf82db35?w=300&h=200&fit=crop",
    ),
    Product(
        name="Coca Cola Zero 6x1,5L",
        discount="-1,99 €",
        valid_until="2024-02-20",
        ean_code="5449000000996",
        image="https://images.unsplash.com/photo-1561758033-d89a9ad46330?w=300&h=200&fit=crop",
    ),
    Product(
        name="Milka Schokolade 100g",
        discount="-0,75 €",
        valid_until="2024-02-10",
        ean_code="7622210951052",
        image="https://images.unsplash.com/photo-1549007994-cb92caebd54b?w=300&h=200&fit=crop",
    ),
    Product(
        name="Haribo Goldbären 200g",
        discount="-0,50 €",
        valid_until="2024-02-12",
        ean_code="4001686301081",
        image="https://images.unsplash.com/photo-1582058091505-f87a2e55a40f?w=300&h=200&fit=crop",
    ),
    Product(
        name="Red Bull Energy Drink 250ml",
        discount="-0,30 €",
        valid_until="2024-02-18",
        ean_code="9002490100059",
        image="https://images.unsplash.com/photo-1570197788417-0e82375c9371?w=300&h=200&fit=crop",
    ),
    Product(
        name="Knorr Fix Spaghetti Bolognese",
        discount="-0,25 €",
        valid_until="2024-02-25",
        ean_code="8712566401234",
        image="https://images.unsplash.com/photo-1551462099-fcb0e0d9db95?w=300&h=200&fit=crop",
    ),
)

# Image affichée quand un produit n'en a pas ou que son URL ne charge pas
FALLBACK_IMAGE_URL = "https://images.unsplash.com/photo-1556909114-f6e7ad7d3136?w=300&h=200&fit=crop&crop=center"
