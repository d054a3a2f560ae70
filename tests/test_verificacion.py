from apps.planes_accion.utils.verificacion import (
    AREA_NO_ESPECIFICADA,
    SUPERVISOR_NO_ASIGNADO,
    VICEPRESIDENCIA_NO_ESPECIFICADA,
    normalizar_lista_verificacion,
    resolver_campo,
    resolver_datos_organizacionales,
)


class TestNormalizarListaVerificacion:

    def test_mapeo(self):
        assert normalizar_lista_verificacion({' Área ': ' Chancado ', 'Turno': 2}) == {
            'Área': 'Chancado',
            'Turno': '2',
        }

    def test_lista_de_etiquetas(self):
        lista = [
            {'label': 'Supervisor', 'value': 'Ana Torres'},
            {'key': 'Empresa', 'value': 'Contratista SAC'},
        ]
        assert normalizar_lista_verificacion(lista) == {
            'Supervisor': 'Ana Torres',
            'Empresa': 'Contratista SAC',
        }

    def test_lista_de_pares(self):
        assert normalizar_lista_verificacion([('Área', 'Taller'), ('Lugar', None)]) == {
            'Área': 'Taller',
            'Lugar': '',
        }

    def test_formas_no_soportadas(self):
        assert normalizar_lista_verificacion(None) == {}
        assert normalizar_lista_verificacion('Área=Taller') == {}
        assert normalizar_lista_verificacion(42) == {}

    def test_descarta_claves_vacias(self):
        assert normalizar_lista_verificacion({'': 'x', None: 'y', 'Área': 'Taller'}) == {'Área': 'Taller'}


class TestResolverCampo:

    def test_gana_el_primer_alias_con_valor(self):
        mapa = {'Area': 'Planta', 'Área': 'Chancado', 'Lugar': 'Patio'}
        assert resolver_campo(mapa, ('Área', 'Area', 'Lugar'), AREA_NO_ESPECIFICADA) == 'Chancado'

    def test_salta_alias_vacios(self):
        mapa = {'Área': '', 'Area': 'Planta'}
        assert resolver_campo(mapa, ('Área', 'Area'), AREA_NO_ESPECIFICADA) == 'Planta'

    def test_valor_por_defecto(self):
        assert resolver_campo({}, ('Área', 'Area'), AREA_NO_ESPECIFICADA) == AREA_NO_ESPECIFICADA


class TestResolverDatosOrganizacionales:

    def test_datos_completos(self):
        datos = resolver_datos_organizacionales({
            'Gerencia': 'VP Operaciones',
            'Sup. Senior': 'Sup. Senior Planta',
            'Superintendencia': 'Mantenimiento',
            'Área Física': 'Molienda',
            'Compañía': 'Contratista SAC',
            'Supervisor': 'Juan Pérez',
        })

        assert datos.vicepresidencia == 'VP Operaciones'
        assert datos.superintendencia_senior == 'Sup. Senior Planta'
        assert datos.superintendencia == 'Mantenimiento'
        assert datos.area_fisica == 'Molienda'
        assert datos.empresa == 'Contratista SAC'
        assert datos.supervisor == 'Juan Pérez'

    def test_mapa_vacio_usa_valores_por_defecto(self):
        datos = resolver_datos_organizacionales({}, empresa_defecto='MSC')

        assert datos.vicepresidencia == VICEPRESIDENCIA_NO_ESPECIFICADA
        assert datos.area_fisica == AREA_NO_ESPECIFICADA
        assert datos.empresa == 'MSC'
        assert datos.supervisor == SUPERVISOR_NO_ASIGNADO

    def test_vicepresidencia_tiene_prioridad_sobre_gerencia(self):
        datos = resolver_datos_organizacionales({'Gerencia': 'G1', 'Vicepresidencia': 'VP1'})
        assert datos.vicepresidencia == 'VP1'
