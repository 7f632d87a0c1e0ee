"""
Couche infrastructure de StreamVault.

Ce module contient les implementations concretes des interfaces definies
dans la couche domaine (ports) :

- persistence/ : Documents JSON sur disque (ecriture atomique, verrous
  inter-processus, validation de schema)

Architecture hexagonale : les services ne dependent que des ports,
l'implementation du stockage peut etre remplacee sans modifier la
logique metier.
"""
