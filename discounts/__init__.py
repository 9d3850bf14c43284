"""
Application discounts - Tableau des promotions supermarché.

Ce module gère:
- La récupération du Google Sheet des promotions (accès direct puis relais CORS)
- Le parsing CSV et la validation des produits
- L'état du rafraîchissement (chargement, échec, prêt)
- Le rendu des codes-barres EAN-13
"""
