"""
Backend espejo de Asaas: sync de clientes, parcelamentos y cobranzas.
"""
