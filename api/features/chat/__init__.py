"""Chat feature package: entities, repository, history assembly, service, controller and router.

One turn of the support widget is handled here: the visitor's message is
stored, the prior turns are assembled into model context, the reply generator
is called and its answer is stored and returned.
"""
