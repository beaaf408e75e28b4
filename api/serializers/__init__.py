# api/serializers/__init__.py
# Este archivo marca el directorio 'serializers' como un paquete Python.
# Los serializers se importan desde su módulo, p. ej.:
# from .base import BasicUserSerializer
# from .clients import ClientSerializer
