"""crudwizard -- invoke Swagger 2.0 operations by ``operationId``.

This package turns a Swagger 2.0 document into something callable: it
dereferences every internal ``$ref`` pointer (including cyclic schema graphs)
and dispatches HTTP operations identified only by their ``operationId``,
threading the arguments and the response through ordered chains of async
interceptors.

Typical usage::

    from crudwizard.client import Dispatcher
    from crudwizard.parser import load_document, resolve_all_references

    document = resolve_all_references(load_document("petstore.json"))
    async with Dispatcher() as dispatcher:
        result = await dispatcher.invoke(document, "getPetById", {"petId": 1})
        if result.ok:
            print(result.response.json())

Modules:
    app: Typer application and console-script entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration, profiles and the config provider.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
