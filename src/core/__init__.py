"""
Couche domaine (core).

Contient les entites du catalogue (schemas pydantic), les objets valeur
(payloads et patchs de mise a jour), les ports et les erreurs du domaine.
Cette couche ne depend d'aucune infrastructure.
"""
