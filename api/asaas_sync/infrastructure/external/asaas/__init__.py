"""
Integracion one-way con Asaas: Asaas -> PostgreSQL.

- client: wrapper HTTP de la API REST de Asaas (httpx async)
- mappers: traduccion pura registro Asaas -> fila local, por entidad
- types: pagina de resultados y errores de integracion

Asaas es la fuente de verdad: las tablas locales son un espejo.
"""
