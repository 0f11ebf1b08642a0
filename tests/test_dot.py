import io

from reconmap.dot import write_dot_data
from reconmap.graph import Edge, Node


def _nodes():
    return [
        Node(0, "domain", "owasp.org", "domain: owasp.org", "DNS", "fqdn"),
        Node(1, "address", "205.251.199.98", "address: 205.251.199.98", "DNS", "ipaddr"),
    ]


def _edges():
    return [Edge(0, 1, label="", title="a_record")]


EXPECTED = """
digraph "OWASP Amass Network Mapping" {
\tsize = "7.5,10"; ranksep="2.5 equally"; ratio=auto;


        node [label="owasp.org",color="red",type="domain",source="DNS"]; n1;

        node [label="205.251.199.98",color="orange",type="address",source="DNS"]; n2;



        n1 -> n2 [label="a_record"];

}
"""


def test_write_dot_data_happy_path():
    buf = io.StringIO()
    write_dot_data(buf, _nodes(), _edges())
    output = buf.getvalue()
    assert 'digraph "OWASP Amass Network Mapping"' in output
    assert output == EXPECTED


def test_write_dot_data_unknown_type_has_empty_color():
    buf = io.StringIO()
    write_dot_data(buf, [Node(0, "mystery", "x", "x", "src")], [])
    assert 'node [label="x",color="",type="mystery",source="src"]; n1;' in buf.getvalue()