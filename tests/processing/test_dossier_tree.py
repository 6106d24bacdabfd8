import xml.etree.ElementTree as ET

from hemicycle.processing.dossier_tree import XmlToTree, xml_to_tree


def test_leaves_become_their_value():
    assert xml_to_tree('<root><legislature v="54"/><intitule-court v="Loi"/></root>') == {
        "legislature": "54",
        "intitule-court": "Loi",
    }


def test_repeated_siblings_are_collected_in_a_list():
    tree = xml_to_tree('<root><auteur v="Dupont"/><auteur v="Peeters"/><legislature v="54"/></root>')

    assert tree == {"auteur": ["Dupont", "Peeters"], "legislature": "54"}


def test_plural_path_with_a_single_element_is_a_list():
    xml = """
    <root>
        <chambre-etou-senat>
            <document-principal>
                <n-du-document v="54K0001001"/>
                <auteur><nom v="Dupont"/></auteur>
            </document-principal>
        </chambre-etou-senat>
    </root>
    """

    tree = xml_to_tree(xml.strip())

    documents = tree["chambre-etou-senat"]["document-principal"]
    assert isinstance(documents, list)
    assert documents[0]["n-du-document"] == "54K0001001"
    assert documents[0]["auteur"] == [{"nom": "Dupont"}]


def test_same_tag_outside_a_plural_path_stays_single():
    tree = xml_to_tree('<root><document-principal><type v="05"/></document-principal></root>')

    assert tree == {"document-principal": {"type": "05"}}


def test_custom_plural_paths_are_anchored_at_the_root():
    root = ET.fromstring('<root><commission><nom v="Justice"/></commission></root>')

    assert XmlToTree(plural_paths=("commission",)).convert(root) == {"commission": [{"nom": "Justice"}]}
    assert XmlToTree(plural_paths=()).convert(root) == {"commission": {"nom": "Justice"}}


def test_leaf_without_value_attribute_is_empty_string():
    assert xml_to_tree("<root><vide/></root>") == {"vide": ""}
